#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""Entry Point for the example executable, without installation."""

import sys

import tickpromise

if __name__ == "__main__":
    sys.exit(tickpromise.main())
