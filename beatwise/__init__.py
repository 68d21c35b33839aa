"""Drill-down analytics (district -> unit -> beat) over a crime-incident dataset."""

__version__ = "0.1.0"
