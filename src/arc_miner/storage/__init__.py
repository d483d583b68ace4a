"""Local fallback storage for reported claims."""
