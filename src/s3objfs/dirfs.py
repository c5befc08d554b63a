from datetime import datetime
from datetime import timezone
from s3objfs.interfaces import IObjectFS
from s3objfs.reader import ObjectStat
from zope.interface import implementer

import contextlib
import io
import logging
import os
import shutil
import tempfile


logger = logging.getLogger(__name__)


class LocalFile(io.BufferedReader):
    """Buffered local file that also answers stat() like a RemoteObject."""

    def __init__(self, path, key):
        super().__init__(io.FileIO(path, "rb"))
        self.key = key

    def stat(self):
        st = os.fstat(self.fileno())
        mtime = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
        return ObjectStat(self.key, st.st_size, mtime)


@implementer(IObjectFS)
class DirFS:
    """Local directory with the same surface as ObjectFS.

    Handy for tests and local development; objects are regular files
    below ``root``.
    """

    def __init__(self, root):
        self.root = root

    def __repr__(self):
        return f"<DirFS {self.root!r}>"

    def _path(self, name):
        # Keys are relative to root even when they start with a separator.
        root = os.path.abspath(self.root)
        path = os.path.abspath(os.path.join(root, name.lstrip("/" + os.sep)))
        if os.path.commonpath([root, path]) != root:
            raise ValueError(f"name escapes the directory: {name!r}")
        return path

    def namespace(self, name):
        if not name:
            raise ValueError("namespace must not be empty")
        return DirFS(name)

    def open(self, name, context=None):
        return LocalFile(self._path(name), name)

    def read_file(self, name, context=None):
        with open(self._path(name), "rb") as f:
            return f.read()

    def put(self, name, data):
        """Write atomically via a temp file in the target directory."""
        if isinstance(data, (bytes, bytearray, memoryview)):
            data = io.BytesIO(data)
        path = self._path(name)
        target_dir = os.path.dirname(path) or "."
        os.makedirs(target_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=target_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                shutil.copyfileobj(data, f)
            os.replace(tmp_path, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise
        logger.debug("wrote %s", path)

    def delete(self, name):
        os.remove(self._path(name))

    def presign_get(self, name, expires_in=900):
        raise NotImplementedError("DirFS does not support presigned URLs")

    def presign_put(self, name, expires_in=900):
        raise NotImplementedError("DirFS does not support presigned URLs")
