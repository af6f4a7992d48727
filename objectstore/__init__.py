"""Object storage facade over the MinIO SDK."""
