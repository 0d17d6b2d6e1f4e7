"""Combination generator: which feature subsets a mining pass evaluates.

Evaluating every subset of the selected features is exponential, so the
pass is bounded by a fixed policy:

- the full selected set is always evaluated
- with 6+ features, the first 20 size-5 subsets (in generation order)
- with 5+ features, the first 30 size-4 subsets (in generation order)

That caps a run at 1 + 20 + 30 = 51 subsets. Subsets are combinations, not
permutations: members keep the order they had in the selection, and no two
subsets contain the same members.
"""

from itertools import combinations, islice

from .entities import FeatureSubset
from .policy import MiningPolicy


def generate_feature_subsets(
    selected_features: list[str], policy: MiningPolicy | None = None
) -> list[FeatureSubset]:
    """Build the ordered list of feature subsets to aggregate.

    Args:
        selected_features: The user's features, in selection order
        policy: Subset caps; production defaults when omitted

    Returns:
        Full set first, then capped size-5 subsets, then capped size-4 subsets
    """
    policy = policy or MiningPolicy()
    features = tuple(selected_features)
    count = len(features)

    subsets = [FeatureSubset(features)]

    if count >= 6:
        subsets.extend(
            FeatureSubset(members)
            for members in islice(combinations(features, 5), policy.five_feature_subset_cap)
        )

    if count >= 5:
        subsets.extend(
            FeatureSubset(members)
            for members in islice(combinations(features, 4), policy.four_feature_subset_cap)
        )

    return subsets
