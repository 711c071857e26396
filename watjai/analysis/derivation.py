"""Derivation of the augmented and precordial leads from leads I, II and III.

aVR, aVL and aVF follow Goldberger's relations. V1-V6 use fixed,
population-level regression coefficients; they are approximations and not
patient specific. The coefficients and the evaluation order of every
expression must stay exactly as written so results match sample for sample.
"""

import logging
from typing import Sequence

import numpy as np

from ..models.leads import DerivedLeadSet

logger = logging.getLogger(__name__)


def _as_tuple(values: np.ndarray) -> tuple:
    return tuple(values.tolist())


def derive_leads(lead1: Sequence[int], lead2: Sequence[int], lead3: Sequence[int]) -> DerivedLeadSet:
    """Compute the nine derived leads.

    Inputs may differ in length; the output is truncated to the shortest
    input (never padded). If any input is empty every derived lead is empty.
    The whole set is recomputed on every call.
    """
    length = min(len(lead1), len(lead2), len(lead3))
    if length == 0:
        return DerivedLeadSet()

    i = np.asarray(lead1[:length], dtype=np.float64)
    ii = np.asarray(lead2[:length], dtype=np.float64)
    iii = np.asarray(lead3[:length], dtype=np.float64)

    derived = DerivedLeadSet(
        avr=_as_tuple(-(i + ii) / 2),
        avl=_as_tuple(i - ii / 2),
        avf=_as_tuple(ii - i / 2),
        v1=_as_tuple(-0.4 * i - 0.2 * ii + 0.1 * iii + 40),
        v2=_as_tuple(-0.3 * i - 0.05 * ii + 0.5 * iii + 30),
        v3=_as_tuple(-0.2 * i + 0.1 * ii + 0.7 * iii + 20),
        v4=_as_tuple(-0.1 * i + 0.25 * ii + 0.8 * iii + 10),
        v5=_as_tuple(0.1 * i + 0.5 * ii + 0.6 * iii),
        v6=_as_tuple(0.3 * i + 0.6 * ii + 0.2 * iii - 10),
    )
    logger.debug(f"Derived nine leads of {length} samples "
                 f"(inputs: {len(lead1)}, {len(lead2)}, {len(lead3)})")
    return derived
