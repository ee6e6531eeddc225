"""Archive layout, packing and writing."""
