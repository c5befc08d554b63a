from s3objfs.config import create_fs
from s3objfs.dirfs import DirFS
from s3objfs.fs import ObjectFS
from s3objfs.reader import RemoteObject


__all__ = ["DirFS", "ObjectFS", "RemoteObject", "create_fs"]
