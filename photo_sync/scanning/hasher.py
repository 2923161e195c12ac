import hashlib
from pathlib import Path

from .. import config
from ..exceptions import FileHashError


class FileHasher:
    def digest(self, path: Path) -> str:
        """
        Computes the content fingerprint (MD5, hex) of the whole file.

        Each call uses its own hashing context, so the result depends only
        on the bytes read. Raises FileHashError if the file can't be read.
        """
        h = hashlib.md5()
        try:
            with open(path, 'rb') as f:
                while chunk := f.read(config.HASH_CHUNK_SIZE):
                    h.update(chunk)
        except OSError as e:
            raise FileHashError(path, e.strerror or str(e)) from e
        return h.hexdigest()
