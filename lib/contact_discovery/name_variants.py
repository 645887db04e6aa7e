"""Nickname <-> formal name expansion used to widen profile search recall."""

# canonical -> nicknames
NICKNAMES: dict[str, tuple[str, ...]] = {
    "robert": ("bob", "bobby", "rob"),
    "william": ("bill", "will", "billy"),
    "michael": ("mike", "mick", "mickey"),
    "steven": ("steve",),
    "stephen": ("steve",),
    "james": ("jim", "jimmy", "jamie"),
    "richard": ("rick", "ricky", "dick", "rich"),
    "david": ("dave", "davey"),
    "thomas": ("tom", "tommy"),
    "joseph": ("joe", "joey"),
    "daniel": ("dan", "danny"),
    "anthony": ("tony", "ant"),
    "christopher": ("chris",),
    "matthew": ("matt", "matty"),
    "nicholas": ("nick", "nicky"),
    "alexander": ("alex", "xander"),
    "samuel": ("sam", "sammy"),
    "edward": ("ed", "eddie", "ted", "ned"),
    "benjamin": ("ben", "benny"),
    "charles": ("charlie", "chuck"),
    "john": ("jack", "johnny", "jon"),
    "peter": ("pete",),
    "andrew": ("andy", "drew"),
    "gregory": ("greg",),
    "jeffrey": ("jeff",),
    "lawrence": ("larry",),
    "elizabeth": ("liz", "beth", "betsy", "lizzy", "lisa"),
    "katherine": ("kate", "kathy", "katie"),
    "margaret": ("meg", "maggie", "peggy"),
    "susan": ("sue", "suzy"),
    "jennifer": ("jen", "jenny"),
    "patricia": ("pat", "patty", "trish"),
}


def _build_reverse(table: dict[str, tuple[str, ...]]) -> dict[str, tuple[str, ...]]:
    reverse: dict[str, list[str]] = {}
    for canonical, nicks in table.items():
        for nick in nicks:
            reverse.setdefault(nick, []).append(canonical)
    return {nick: tuple(canonicals) for nick, canonicals in reverse.items()}


# nickname -> canonicals ("steve" maps to both steven and stephen)
FORMAL_NAMES: dict[str, tuple[str, ...]] = _build_reverse(NICKNAMES)


def alternate_forms(name: str) -> list[str]:
    """Other forms of a first name, capitalised, in table order.

    Never includes the input itself. Unknown names give [].
    """
    if not name or not name.strip():
        return []
    lower = name.strip().lower()
    forms: list[str] = []
    for candidate in NICKNAMES.get(lower, ()) + FORMAL_NAMES.get(lower, ()):
        if candidate != lower and candidate not in forms:
            forms.append(candidate)
    return [f.capitalize() for f in forms]


def name_variants(name: str) -> set[str]:
    """All equivalent forms of a first name. Always contains name unchanged."""
    return {name, *alternate_forms(name)}
