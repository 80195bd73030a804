"""Root conftest. pytest's rootdir conftest handling inserts the repository root on sys.path, so test/ imports fossil_scm without installing."""
