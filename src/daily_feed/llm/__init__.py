"""Language model summarization of feed articles."""
