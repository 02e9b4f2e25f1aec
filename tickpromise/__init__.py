# -*- coding: utf-8 -*-

from .__version__ import __version__  # noqa

from .example import main
from .promise import DeferredValue

__all__ = ['DeferredValue', 'main']


if __name__ == "__main__":
    main()
