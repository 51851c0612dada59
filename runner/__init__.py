"""Link-walking smoke runner for the catalog API."""
