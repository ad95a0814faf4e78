#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Render a numbered batch of meal tickets into an A4 PDF.
"""

import ticket_sheet_maker.cli


if __name__ == "__main__":
	ticket_sheet_maker.cli.main()
