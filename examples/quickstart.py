"""Quickstart — resolve a local endpoint, write, and read with unifs.

Demonstrates:
- Building a FileSystemBackend from an endpoint address
- Initializing it and publishing the filesystem on a Context
- Writing, listing, and reading files through the uniform interface
"""

from __future__ import annotations

import tempfile

from unifs import Context, FileSystemBackend, retrieve

if __name__ == "__main__":
    with tempfile.TemporaryDirectory() as tmp:
        backend = FileSystemBackend(endpoint=f"file://{tmp}")
        backend.init()

        ctx = backend.inject_context(Context.background())

        # Downstream code only sees the context
        fs = retrieve(ctx)
        assert fs is not None

        fs.write("reports/hello.txt", b"Hello, world!")
        print(f"File exists: {fs.exists('reports/hello.txt')}")
        print(f"Content: {fs.read_bytes('reports/hello.txt')}")

        for info in fs.list_dir("reports"):
            print(f"{info.name}: {info.size} bytes, modified {info.modified_at}")

        backend.close()

    print("Done! Temp directory cleaned up automatically.")
