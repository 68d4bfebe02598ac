"""Application workflows that orchestrate pure receipt stages and runtime services."""
