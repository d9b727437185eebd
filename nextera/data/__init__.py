# Data layer: pydantic models, catalog loaders and static JSON tables
