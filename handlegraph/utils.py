import time
from datetime import datetime

import psutil


def node_name(node_id: int, reverse: bool) -> str:
    return f'{node_id}_{"-" if reverse else "+"}'


def node_complement(s: str) -> str:
    return s[:-1] + _flip(s[-1])


def edge_complement(e: tuple[str, str]) -> tuple[str, str]:
    return node_complement(e[1]), node_complement(e[0])


def _flip(s: str) -> str:
    if s == '+':
        return '-'
    elif s == '-':
        return '+'
    else:
        raise ValueError(f'Not an orientation: {s!r}')


def log_action(log_path: str, start_time: float, action: str) -> None:
    """
    Append one line to a CSV log: timestamp, seconds since start_time, resident memory in MB, action.
    """
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    memory_mb = psutil.Process().memory_info().rss / 1024 / 1024
    elapsed = time.time() - start_time

    with open(log_path, "a") as log_file:
        log_file.write(f"{timestamp},{elapsed:.2f} s,{memory_mb:.2f} MB,{action}\n")
