"""Provider resolution and LLM executors for grey-so."""
