# -*- encoding: utf-8 -*-
# @File   : abstract.py
# @Time   : 2026/10/18 14:02:11
# @Author : EchoCapture contributors

from abc import ABCMeta, abstractmethod
from io import TextIOBase
from os import PathLike, fspath


class FileHandler[T](metaclass=ABCMeta):
    """Binds one file on disk to a stream (de)serializer of `T`.

    Subclasses only deal with decoded text streams;
    opening, encoding and newline handling live here.
    """
    def __init__(
        self, filename: str | PathLike[str], encoding: str = 'utf-8'
    ) -> None:
        self._fn = fspath(filename)
        self._codec = encoding

    @staticmethod
    @abstractmethod
    def readstream(buf: TextIOBase) -> T:
        raise NotImplementedError

    @abstractmethod
    def writestream(self, instance: T, buf: TextIOBase, **options) -> None:
        raise NotImplementedError

    def read(self) -> T:
        # newline='' keeps '\r\n' intact, otherwise raw lines would change.
        with open(self._fn, 'r', encoding=self._codec, newline='') as fp:
            return self.readstream(fp)

    def write(self, instance: T, **options) -> None:
        """`options` are handed over to `writestream()`."""
        with open(self._fn, 'w', encoding=self._codec, newline='') as fp:
            self.writestream(instance, fp, **options)

    def __str__(self) -> str:
        return self._fn
