"""Registry lookup clients — one module per public package registry."""
