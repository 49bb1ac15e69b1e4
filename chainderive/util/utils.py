"""Miscellaneous helpers shared across chainderive."""

import difflib
from typing import Iterable, List, Optional


def get_closest_options(
    val: str, valid_options: Iterable[str], cutoff: float = 0.59
) -> Optional[List[str]]:
    """If the user asks for an unknown name, find the closest valid names

    Parameters
    ----------
    val : str
        User input
    valid_options : iterable of str
        Names that actually exist
    cutoff : a float in the range [0, 1]
        See difflib.get_close_matches
        Possibilities that don't score at least that similar to word are ignored.

    Returns
    -------
    closest_options : list or None
        List of best guesses, or None if nothing close is found

    """
    valid_options = list(valid_options)

    # Perhaps the user just capitalized it wrong?
    is_it_just_capitalized_wrong = [
        i for i in valid_options if val.lower() == i.lower()
    ]
    if len(is_it_just_capitalized_wrong) > 0:
        return is_it_just_capitalized_wrong

    # Perhaps the input is a substring of a valid option?
    is_it_a_substring = [i for i in valid_options if val.lower() in i.lower()]
    if len(is_it_a_substring) > 0:
        return is_it_a_substring

    # "imonline" vs "im_online", "technicalCommittee" vs "technical_committee"
    squashed = val.lower().replace("_", "")
    is_it_just_spelled_differently = [
        i for i in valid_options if i.lower().replace("_", "") == squashed
    ]
    if len(is_it_just_spelled_differently) > 0:
        return is_it_just_spelled_differently

    maybe_difflib_can_find_something = difflib.get_close_matches(
        val, valid_options, cutoff=cutoff
    )
    if len(maybe_difflib_can_find_something) > 0:
        return maybe_difflib_can_find_something

    return None


def missing_name_message(kind: str, name: str, owner: str, valid_options: Iterable[str]) -> str:
    """Build the error message for an unknown group or method name.

    Parameters
    ----------
    kind : str
        What was looked up, e.g. ``"derive group"``.
    name : str
        The name that was not found.
    owner : str
        Where it was looked up, e.g. ``"DerivedObject"``.
    valid_options : iterable of str
        Names that exist.

    Returns
    -------
    str

    """
    valid_options = sorted(valid_options)
    message = f"{owner} has no {kind} '{name}'."
    closest = get_closest_options(name, valid_options) if valid_options else None
    if closest:
        message += f" Did you mean any of the following: {closest}?"
    elif valid_options:
        message += f" Available options: {valid_options}"
    else:
        message += " No options are available."
    return message
