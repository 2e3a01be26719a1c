import pandas as pd

from core.schemas import SCORE_FIELDS

TRADE_OFF_METRICS = list(SCORE_FIELDS)


def option_labels(response):
    """Option names made unique so they can index a table."""
    seen = {}
    labels = []
    for opt in response.options:
        count = seen.get(opt.name, 0)
        seen[opt.name] = count + 1
        labels.append(opt.name if count == 0 else f"{opt.name} ({count + 1})")
    return labels


def scores_frame(response) -> pd.DataFrame:
    rows = [[getattr(opt.scores, m) for m in TRADE_OFF_METRICS] for opt in response.options]
    df = pd.DataFrame(rows, columns=TRADE_OFF_METRICS, index=option_labels(response))
    df.index.name = "option"
    return df


def metric_rows(response, metric):
    if metric not in TRADE_OFF_METRICS:
        raise ValueError(f"Unknown metric: {metric}")
    return [(label, getattr(opt.scores, metric)) for label, opt in zip(option_labels(response), response.options)]
