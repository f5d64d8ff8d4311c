"""npm registry client, package.json loader and npm command wrapper."""
