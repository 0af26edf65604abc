"""depconvert command line interface."""
