"""Post domain: model, schemas and storage."""
