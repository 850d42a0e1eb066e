"""piecharter: one labelled pie-chart image per tabular row."""

__version__ = "0.1.0"
