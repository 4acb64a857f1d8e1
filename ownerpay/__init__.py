"""Owner Pay - Canadian owner-salary tax and gross-up calculations."""

__version__ = "0.3.0"
