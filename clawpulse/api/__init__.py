"""HTTP API: public read endpoints and the local action endpoint."""
