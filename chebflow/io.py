"""
HDF5 persistence of fields and scalars.

Datasets are addressed by name (groups separated by '/'). Files are opened
in append mode and existing datasets are replaced, so the same file can be
written repeatedly. Time series grow through append_field.
"""

import logging

import h5py
import numpy as np

logger = logging.getLogger(__name__)


def _replace(h5, name, data):
    if name in h5:
        del h5[name]
    h5.create_dataset(name, data=data)


def write_field(path, name, array):
    """
    Write an array to dataset *name* of an HDF5 file.

    Args:
        path (str or Path): HDF5 file (created if missing)
        name (str): Dataset name, e.g. "temp/vhat"
        array (ndarray): Real or complex array
    """
    with h5py.File(path, "a") as h5:
        _replace(h5, name, np.asarray(array))


def read_field(path, name):
    """
    Read dataset *name* from an HDF5 file.

    Raises:
        KeyError: If the dataset does not exist
    """
    with h5py.File(path, "r") as h5:
        if name not in h5:
            raise KeyError(f"Dataset '{name}' not found in {path}")
        return np.array(h5[name])


def write_scalar(path, name, value):
    """Write a scalar (0-d dataset) to an HDF5 file."""
    with h5py.File(path, "a") as h5:
        _replace(h5, name, value)


def read_scalar(path, name):
    """Read a scalar dataset from an HDF5 file."""
    with h5py.File(path, "r") as h5:
        if name not in h5:
            raise KeyError(f"Dataset '{name}' not found in {path}")
        return h5[name][()]


def append_field(path, name, values):
    """
    Append 1-D *values* to a resizable dataset, creating it if missing.

    Raises:
        ValueError: If *name* exists but cannot grow along axis 0
    """
    values = np.atleast_1d(np.asarray(values))
    if values.shape[0] == 0:
        return
    with h5py.File(path, "a") as h5:
        if name not in h5:
            h5.create_dataset(name, data=values, maxshape=(None,) + values.shape[1:],
                              chunks=True)
            return
        dset = h5[name]
        if dset.maxshape[0] is not None:
            raise ValueError(f"Dataset '{name}' in {path} is not resizable")
        start = dset.shape[0]
        dset.resize(start + values.shape[0], axis=0)
        dset[start:] = values
