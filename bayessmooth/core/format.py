"""Text rendering for smoothing summaries."""

import numpy as np
from prettytable import PrettyTable, TableStyle

RULE_WIDTH = 78


def summary_header(title, subtitle, fields):
    """Return the opening block: a ruled title followed by ``key: value`` lines."""
    lines = ["=" * RULE_WIDTH, f" {title}", f" {subtitle}", "=" * RULE_WIDTH, ""]
    lines.extend(f" {key}: {value}" for key, value in fields.items())
    return lines


def section(label, body):
    """Return a section with a ruled label above *body* lines."""
    return ["", "-" * RULE_WIDTH, f" {label}", "-" * RULE_WIDTH, *body]


def window_section(window):
    """Render a weight window as a section of right-aligned integer rows."""
    window = np.asarray(window)
    width = max((len(str(w)) for w in window.ravel()), default=1)
    rows = [" " + " ".join(f"{w:>{width}}" for w in row) for row in window]
    return section(f"Window ({window.shape[0]} x {window.shape[1]})", rows)


def logit_section(estimates, n_missing):
    """Summarise a raster of logit estimates, counting unresolved cells."""
    finite = estimates[np.isfinite(estimates)]
    body = [
        f" Missing cells: {n_missing}",
        f" Unresolved cells: {int(np.isnan(estimates).sum())}",
    ]
    if finite.size:
        body.append(f" Range: [{finite.min():.4f}, {finite.max():.4f}]")
        body.append(f" Mean: {finite.mean():.4f}")
    return section("Estimates (logit scale)", body)


def band_section(names, smoothness, probs, labels):
    """Tabulate each class band: its variance, mean probability and label count."""
    table = PrettyTable()
    table.set_style(TableStyle.SINGLE_BORDER)
    table.field_names = ["Class", "Smoothness", "Mean Prob", "Labelled Pixels"]
    for idx, (name, variance, band) in enumerate(zip(names, smoothness, probs, strict=True)):
        valid = band[~np.isnan(band)]
        mean_prob = f"{valid.mean():.2f}" if valid.size else "NA"
        table.add_row([name, f"{variance:g}", mean_prob, int(np.sum(labels == idx))])
    table.align = "r"
    table.align["Class"] = "l"

    body = str(table).split("\n")
    body.extend(["", f" Unlabelled pixels: {int(np.sum(labels < 0))}"])
    return section("Classes", body)


def render(lines, note):
    """Close a summary with a footer note and stretch the rules to fit the widest line."""
    lines = [*lines, "=" * RULE_WIDTH, f" {note}"]
    width = max(RULE_WIDTH, *(len(line) for line in lines))
    widened = []
    for line in lines:
        if line and set(line) in ({"="}, {"-"}):
            line = line[0] * width
        widened.append(line)
    return "\n".join(widened)


def attach_summary(result_class, summarise):
    """Use *summarise* as both ``__repr__`` and ``__str__`` of a result class."""
    result_class.__repr__ = summarise
    result_class.__str__ = summarise
