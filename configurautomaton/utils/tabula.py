from tabulate import tabulate

from configurautomaton.utils.io import flatten


def tabula(data: dict, headers=("Config key", "Config value")) -> str:
    table = []
    for key, value in flatten(data).items():
        if isinstance(value, list):
            value = ', '.join(map(str, value))
        elif isinstance(value, dict):
            value = str(value)
        table.append([key, value])
    return tabulate(
        table,
        headers=list(headers),
        tablefmt="grid"
    )
