"""qrsvg — vectorize rasterized QR codes into SVG tile grids."""

__version__ = "0.1.0"
