"""Owner accounts backend for the Delfood delivery platform."""
