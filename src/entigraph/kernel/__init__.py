"""Pure core: metadata normalization and schema building. No I/O."""
