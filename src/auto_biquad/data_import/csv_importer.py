# src/auto_biquad/data_import/csv_importer.py

import csv
import logging
import os

import numpy as np

from .. import config
from ..exceptions import LengthMismatchError

logger = logging.getLogger(__name__)


def try_parse_number(text, decimal_point=config.CSV_DECIMAL_POINT):
    """Parses a number written with `decimal_point`; returns None on failure."""
    try:
        return float(text.replace(decimal_point, ".").replace(" ", ""))
    except ValueError:
        return None


def import_xy_data(file_name, separator=config.CSV_SEPARATOR, decimal_point=config.CSV_DECIMAL_POINT):
    """
    Reads (frequency, level) pairs from a delimited text file.

    The first two fields of every line are used. Lines with fewer fields or
    fields that are not numbers (headers, comments) are skipped. A missing
    file gives two empty arrays.

    Returns:
        (x, y) numpy arrays.
    """
    x, y = [], []
    if not os.path.isfile(file_name):
        logger.warning("File not found: %s", file_name)
        return np.array(x), np.array(y)

    with open(file_name, "r", newline="") as f:
        for fields in csv.reader(f, delimiter=separator):
            if len(fields) < 2:
                continue
            xd = try_parse_number(fields[0], decimal_point)
            yd = try_parse_number(fields[1], decimal_point)
            if xd is None or yd is None:
                continue
            x.append(xd)
            y.append(yd)

    logger.info("Imported %d points from %s", len(x), file_name)
    return np.array(x), np.array(y)


def save_xy_data(file_name, x, y, header=("frequency", "raw")):
    """Save a curve to a CSV file, two decimals per value."""
    if len(x) != len(y):
        raise LengthMismatchError("x and y must be the same length.")

    with open(file_name, "w", newline="") as csvfile:
        csv_writer = csv.writer(csvfile)
        csv_writer.writerow(list(header))
        for xv, yv in zip(x, y):
            csv_writer.writerow([f"{xv:.2f}", f"{yv:.2f}"])
    logger.info("Curve saved to '%s'", file_name)
