"""First-name variant table (nicknames and formal names).

Maps a formal first name to its known nicknames and cross-language
equivalents. Lookups work in both directions: a nickname resolves to its
formal names and to the sibling nicknames of those formal names.
"""

from types import MappingProxyType
from typing import Mapping

NAME_VARIANTS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    # Common English name variants
    "robert": ("bob", "rob", "robbie", "bobby", "bert"),
    "william": ("bill", "will", "billy", "willy", "liam"),
    "richard": ("rick", "dick", "rich", "ricky"),
    "james": ("jim", "jimmy", "jamie"),
    "john": ("jack", "johnny", "jon"),
    "michael": ("mike", "mick", "mickey", "mikey"),
    "joseph": ("joe", "joey"),
    "thomas": ("tom", "tommy"),
    "charles": ("charlie", "chuck", "chas"),
    "david": ("dave", "davy"),
    "daniel": ("dan", "danny"),
    "edward": ("ed", "eddie", "ted", "teddy", "ned"),
    "steven": ("steve", "stevie"),
    "stephen": ("steve", "stevie"),
    "christopher": ("chris", "kit"),
    "matthew": ("matt", "matty"),
    "anthony": ("tony", "ant"),
    "andrew": ("andy", "drew"),
    "nicholas": ("nick", "nicky"),
    "benjamin": ("ben", "benny", "benji"),
    "samuel": ("sam", "sammy"),
    "alexander": ("alex", "al", "xander", "sasha"),
    "jonathan": ("jon", "jonny", "nathan"),
    "timothy": ("tim", "timmy"),
    "gregory": ("greg", "gregg"),
    "patrick": ("pat", "paddy"),
    "raymond": ("ray",),
    "lawrence": ("larry", "laurie"),
    "gerald": ("gerry", "jerry"),
    "kenneth": ("ken", "kenny"),
    "ronald": ("ron", "ronny"),
    "donald": ("don", "donny"),
    "phillip": ("phil",),
    "philip": ("phil",),
    "eugene": ("gene",),
    "walter": ("walt", "wally"),
    "frederick": ("fred", "freddy", "freddie"),
    "albert": ("al", "bert", "bertie"),
    "arthur": ("art", "artie"),
    "henry": ("hank", "harry", "hal"),
    "harold": ("harry", "hal"),
    "peter": ("pete",),
    "douglas": ("doug", "dougie"),
    "leonard": ("leo", "len", "lenny"),
    "theodore": ("ted", "teddy", "theo"),
    "francis": ("frank", "frankie", "fran"),
    "bernard": ("bernie", "barney"),
    "louis": ("lou", "louie"),
    "vincent": ("vince", "vinny", "vin"),
    "nathaniel": ("nate", "nat", "nathan"),
    "elizabeth": ("liz", "lizzy", "beth", "betty", "betsy", "eliza", "lisa"),
    "margaret": ("maggie", "meg", "peggy", "marge", "margie"),
    "catherine": ("cathy", "kate", "katie", "cat"),
    "katherine": ("kathy", "kate", "katie", "kat"),
    "patricia": ("pat", "patty", "tricia", "trish"),
    "jennifer": ("jen", "jenny", "jenn"),
    "rebecca": ("becky", "becca"),
    "deborah": ("deb", "debbie"),
    "susan": ("sue", "susie", "suzy"),
    "dorothy": ("dot", "dotty", "dottie"),
    "victoria": ("vicky", "vicki", "tori"),
    "christine": ("chris", "chrissy", "tina"),
    "christina": ("chris", "chrissy", "tina"),
    "alexandra": ("alex", "lexi", "sandra"),
    "samantha": ("sam", "sammy"),
    "jessica": ("jess", "jessie"),
    "stephanie": ("steph", "stephie"),
    "melissa": ("mel", "missy", "lissa"),
    "jacqueline": ("jackie", "jacqui"),
    "carolyn": ("carol", "carrie", "lyn"),
    "caroline": ("carol", "carrie", "line"),
    "abigail": ("abby", "gail"),
    "madeleine": ("maddie", "maddy"),
    "madeline": ("maddie", "maddy"),
    "josephine": ("jo", "josie"),
    "gabrielle": ("gabby", "gabi", "elle"),
    "gabriella": ("gabby", "gabi", "ella"),
    "natalie": ("nat", "natty"),
    # International variants
    "mikhail": ("misha", "michael"),
    "aleksandr": ("sasha", "alex", "alexander"),
    "yevgeny": ("eugene", "zhenya"),
    "dmitri": ("dima", "dmitry"),
    "nikolai": ("kolya", "nicholas"),
    "sergei": ("seryozha",),
    "vladimir": ("volodya", "vlad"),
    "giuseppe": ("joe", "joseph"),
    "giovanni": ("john", "gianni"),
    "francesco": ("frank", "francis"),
    "antonio": ("tony", "anthony"),
    "johannes": ("john", "hans", "johan"),
    "wilhelm": ("william", "willi"),
    "friedrich": ("frederick", "fritz"),
    "heinrich": ("henry", "heinz"),
    "karl": ("charles", "carl"),
})


def _build_reverse(table: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
    reverse: dict[str, list[str]] = {}
    for formal, variants in table.items():
        for variant in variants:
            reverse.setdefault(variant, []).append(formal)
    return MappingProxyType({k: tuple(v) for k, v in reverse.items()})


NAME_VARIANT_REVERSE = _build_reverse(NAME_VARIANTS)


def get_name_variants(first_name: str | None) -> list[str]:
    """Return all known variants of a first name, including the name itself.

    Order is deterministic: the name first, then its nicknames, then formal
    names it is a nickname of together with their other nicknames.
    """
    if not first_name:
        return []

    normalized = first_name.lower().strip()
    variants = [normalized]

    def add(name: str) -> None:
        if name not in variants:
            variants.append(name)

    for nickname in NAME_VARIANTS.get(normalized, ()):
        add(nickname)

    for formal in NAME_VARIANT_REVERSE.get(normalized, ()):
        add(formal)
        for nickname in NAME_VARIANTS.get(formal, ()):
            add(nickname)

    return variants


def are_name_variants(name1: str | None, name2: str | None) -> bool:
    """Check if two first names are variants of each other."""
    if not name1 or not name2:
        return False

    n1 = name1.lower().strip()
    n2 = name2.lower().strip()
    if n1 == n2:
        return True

    return n2 in get_name_variants(n1)
