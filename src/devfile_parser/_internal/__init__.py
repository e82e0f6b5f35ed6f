"""Internal loaders and decoders; use devfile_parser.api instead."""
