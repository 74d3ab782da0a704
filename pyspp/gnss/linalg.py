# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Linear algebra for the 4-parameter navigation solution"""

import numpy as np
from numba import njit

from ..core.constants import SINGULAR_EPS


@njit(cache=True)
def invert_4x4(A, eps=SINGULAR_EPS):
    """
    Invert a 4x4 matrix by Gauss-Jordan elimination with partial pivoting

    Parameters
    ----------
    A : ndarray, shape (4, 4)
        Matrix to invert
    eps : float
        A pivot with magnitude <= eps * max|A| marks the matrix singular

    Returns
    -------
    ok : bool
        False if the matrix is singular
    inv : ndarray, shape (4, 4)
        Inverse, zeros when singular
    """
    aug = np.zeros((4, 8))
    scale = 0.0
    for r in range(4):
        for c in range(4):
            a = abs(A[r, c])
            # NaN and inf entries
            if not a < np.inf:
                return False, np.zeros((4, 4))
            aug[r, c] = A[r, c]
            if a > scale:
                scale = a
        aug[r, 4 + r] = 1.0
    tol = eps * scale

    for col in range(4):
        piv = col
        maxabs = abs(aug[col, col])
        for r in range(col + 1, 4):
            v = abs(aug[r, col])
            if v > maxabs:
                maxabs = v
                piv = r
        if not maxabs > tol:
            return False, np.zeros((4, 4))

        if piv != col:
            for c in range(8):
                tmp = aug[col, c]
                aug[col, c] = aug[piv, c]
                aug[piv, c] = tmp

        invpiv = 1.0 / aug[col, col]
        for c in range(8):
            aug[col, c] *= invpiv

        for r in range(4):
            if r == col:
                continue
            f = aug[r, col]
            if f != 0.0:
                for c in range(8):
                    aug[r, c] -= f * aug[col, c]

    inv = np.empty((4, 4))
    for r in range(4):
        for c in range(4):
            inv[r, c] = aug[r, 4 + c]
    return True, inv


def reciprocal_condition(N: np.ndarray, N_inv: np.ndarray) -> float:
    """Reciprocal 1-norm condition number of N given its inverse"""
    return 1.0 / (np.linalg.norm(N, 1) * np.linalg.norm(N_inv, 1))


def normal_equations_solve(G: np.ndarray, y: np.ndarray, eps: float = SINGULAR_EPS):
    """
    Least-squares solution of G @ dx = y through the normal equations

    Solves (G^T G) dx = G^T y with the 4x4 Gauss-Jordan inverse. The normal
    matrix is singular when a pivot falls below eps relative to its largest
    entry, or when its reciprocal condition number is at most eps.

    Parameters
    ----------
    G : np.ndarray
        Design matrix, shape (m, 4)
    y : np.ndarray
        Residual vector, shape (m,)
    eps : float
        Relative singularity threshold

    Returns
    -------
    ok : bool
        False if G^T G is singular
    dx : np.ndarray
        Solution, shape (4,); zeros when singular
    """
    G = np.asarray(G, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    if G.ndim != 2 or G.shape[1] != 4:
        raise ValueError(f"Design matrix must have shape (m, 4), got {G.shape}")
    if y.shape != (G.shape[0],):
        raise ValueError(f"Residual vector must have shape ({G.shape[0]},), got {y.shape}")

    GTG = G.T @ G
    GTy = G.T @ y

    ok, GTG_inv = invert_4x4(np.ascontiguousarray(GTG), eps)
    if not ok or not reciprocal_condition(GTG, GTG_inv) > eps:
        return False, np.zeros(4)
    return True, GTG_inv @ GTy
