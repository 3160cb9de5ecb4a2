"""Import root for the study-data packages."""
