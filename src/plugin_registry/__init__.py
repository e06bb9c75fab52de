"""Package, publish, and index plugin releases in an object-storage registry."""
