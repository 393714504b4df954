"""Domain services: authentication, task CRUD and security primitives."""
