"""
Command-line interface for the HDP toolkit.

Scores scenarios against the disease models, explains which features drive a
score, compares two scenarios with an improvement timeline, and manages named
profiles in a JSON profile store.

Scenario sources accepted by -s/-a/-b:
  default      the default scenario A
  target       the default scenario B (A with a few lifestyle improvements)
  <preset>     a built-in preset (Athlete, Office, Smoker, Diabetic)
  @<name>      a profile from the profile store
Any source can be adjusted with repeated --set FIELD=VALUE options.
"""

import json
import logging
import os
import sys
import typing

import click
import pandas as pd
from stairval.notepad import create_notepad

from .comparison import compare_scenarios, format_percent
from .disease import DEFAULT_REGISTRY, get_model
from .errors import HDPError
from .features import FeatureVector
from .importance import importance, rank_importance
from .loader import load_profile_table, map_profile_table
from .presets import DEFAULT_FEATURES, DEFAULT_TARGET, PRESETS, get_preset
from .scorer import assess, round_half_up
from .store import JsonProfileStore, ProfileStore
from .timeline import DEFAULT_STEPS, timeline

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_STORE = os.path.join(click.get_app_dir("HDP"), "profiles.json")


class _HDPGroup(click.Group):
    # report library errors as a clean "Error: ..." with exit code 1
    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except HDPError as e:
            logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(e)) from e


def _parse_overrides(ctx, param, values: tuple[str, ...]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for item in values:
        field, sep, value = item.partition("=")
        if not sep or not field.strip():
            raise click.BadParameter(f"expected FIELD=VALUE, got {item!r}")
        overrides[field.strip()] = value.strip()
    return overrides


def _disease_option(function):
    return click.option(
        "-d",
        "--disease",
        "disease_key",
        default="heart",
        show_default=True,
        help=f"disease model ({', '.join(DEFAULT_REGISTRY.keys())})",
    )(function)


@click.group(cls=_HDPGroup)
@click.option("--verbose", is_flag=True, help="Also emit debug logs to stderr")
@click.option(
    "--log-file-path",
    type=click.Path(dir_okay=False, writable=True),
    help="Append timestamped logs to this file",
)
@click.option(
    "--profile-store",
    "profile_store_path",
    default=DEFAULT_PROFILE_STORE,
    show_default=True,
    envvar="HDP_PROFILE_STORE",
    type=click.Path(dir_okay=False),
    help="JSON file holding saved profiles (env: HDP_PROFILE_STORE)",
)
@click.pass_context
def main(ctx, verbose: bool, log_file_path: typing.Optional[str], profile_store_path: str):
    """HDP: explore illustrative disease risk for what-if health scenarios."""
    _configure_logging(verbose, log_file_path)
    ctx.ensure_object(dict)
    ctx.obj["store"] = JsonProfileStore(profile_store_path)


def _configure_logging(verbose: bool, log_file_path: typing.Optional[str]) -> None:
    handlers: list[logging.Handler] = []
    if log_file_path:
        handlers.append(logging.FileHandler(log_file_path, mode="a", encoding="utf-8"))
    if verbose:
        handlers.append(logging.StreamHandler(sys.stderr))
    if handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
            force=True,
        )


def _resolve_scenario(source: str, overrides: dict[str, str], store: ProfileStore) -> FeatureVector:
    """
    Turn a scenario source (default / target / preset / @profile) plus
    FIELD=VALUE overrides into a FeatureVector.
    """
    key = source.strip()
    if key.startswith("@"):
        features = store.load(key[1:])
    elif key.casefold() == "default":
        features = DEFAULT_FEATURES
    elif key.casefold() == "target":
        features = DEFAULT_TARGET
    else:
        features = get_preset(key)

    if overrides:
        # go through the interchange form so string values are parsed like stored ones
        record = features.to_dict()
        record.update(overrides)
        features = FeatureVector.from_dict(record)
    logger.debug(f"Scenario {source!r} resolved to {features}")
    return features


def _echo_table(rows: list[dict[str, typing.Any]]) -> None:
    click.echo(pd.DataFrame(rows).to_string(index=False))


def _report_issues(notepad, row_count: int, valid_count: int, strict: bool = False) -> None:
    """Print a one-line import summary, then every error and warning from the notepad."""
    errors = list(notepad.errors())
    warnings = list(notepad.warnings())
    click.echo(
        f"Profile table: {row_count} rows, {valid_count} valid, "
        f"{len(errors)} errors, {len(warnings)} warnings"
    )
    if errors:
        click.echo("Errors (nothing will be imported):" if strict else "Errors (rows skipped):")
        for issue in errors:
            click.echo(f"  {issue}")
    if warnings:
        click.echo("Warnings:")
        for issue in warnings:
            click.echo(f"  {issue}")


@main.command(name="diseases")
def diseases():
    """List the supported disease models."""
    _echo_table(
        [{"key": model.key, "label": model.label, "bias": model.bias} for model in DEFAULT_REGISTRY]
    )


@main.command(name="presets")
def presets():
    """List the built-in scenarios."""
    click.echo("default")
    click.echo("target")
    for name in PRESETS:
        click.echo(name)


@main.command(name="score")
@_disease_option
@click.option("-s", "--scenario", default="default", show_default=True, help="scenario source")
@click.option("--set", "overrides", multiple=True, callback=_parse_overrides, help="FIELD=VALUE override (repeatable)")
@click.pass_context
def score_command(ctx, disease_key: str, scenario: str, overrides: dict[str, str]):
    """Score one scenario."""
    features = _resolve_scenario(scenario, overrides, ctx.obj["store"])
    result = assess(features, disease_key)
    label = get_model(disease_key).label
    click.echo(f"{label}: {format_percent(result.probability)} (p={result.probability:.6f}, z={result.z:.4f})")


@main.command(name="explain")
@_disease_option
@click.option("-s", "--scenario", default="default", show_default=True, help="scenario source")
@click.option("--set", "overrides", multiple=True, callback=_parse_overrides, help="FIELD=VALUE override (repeatable)")
@click.option("--ranked", is_flag=True, help="Sort by contribution size instead of the fixed feature order")
@click.option("--json", "as_json", is_flag=True, help="Print the entries as JSON")
@click.pass_context
def explain(ctx, disease_key: str, scenario: str, overrides: dict[str, str], ranked: bool, as_json: bool):
    """Show how much each feature contributes to a scenario's score."""
    features = _resolve_scenario(scenario, overrides, ctx.obj["store"])
    entries = importance(features, disease_key)
    if ranked:
        entries = rank_importance(entries)
    if as_json:
        click.echo(json.dumps([entry.to_dict() for entry in entries], indent=2))
        return
    _echo_table(
        [
            {
                "feature": entry.label,
                "contribution": round(entry.raw_contribution, 4),
                "share": f"{entry.share_percent}%",
            }
            for entry in entries
        ]
    )


@main.command(name="timeline")
@_disease_option
@click.option("-a", "--scenario-a", default="default", show_default=True, help="starting scenario source")
@click.option("-b", "--scenario-b", default="target", show_default=True, help="target scenario source")
@click.option("--set-a", "overrides_a", multiple=True, callback=_parse_overrides, help="FIELD=VALUE override for A")
@click.option("--set-b", "overrides_b", multiple=True, callback=_parse_overrides, help="FIELD=VALUE override for B")
@click.option("--steps", default=DEFAULT_STEPS, show_default=True, type=int, help="number of timeline points (>= 2)")
@click.option("--json", "as_json", is_flag=True, help="Print the points as JSON")
@click.pass_context
def timeline_command(ctx, disease_key, scenario_a, scenario_b, overrides_a, overrides_b, steps: int, as_json: bool):
    """Score the gradual transition from scenario A to scenario B."""
    store = ctx.obj["store"]
    start = _resolve_scenario(scenario_a, overrides_a, store)
    end = _resolve_scenario(scenario_b, overrides_b, store)
    points = timeline(start, end, disease_key, steps)
    if as_json:
        click.echo(json.dumps([point.to_dict() for point in points], indent=2))
        return
    _echo_table(
        [{"step": f"+{point.step}", "risk": format_percent(point.risk)} for point in points]
    )


@main.command(name="compare")
@_disease_option
@click.option("-a", "--scenario-a", default="default", show_default=True, help="scenario A source")
@click.option("-b", "--scenario-b", default="target", show_default=True, help="scenario B source")
@click.option("--set-a", "overrides_a", multiple=True, callback=_parse_overrides, help="FIELD=VALUE override for A")
@click.option("--set-b", "overrides_b", multiple=True, callback=_parse_overrides, help="FIELD=VALUE override for B")
@click.option("--steps", default=DEFAULT_STEPS, show_default=True, type=int, help="number of timeline points (>= 2)")
@click.option("--json", "as_json", is_flag=True, help="Print the full comparison as JSON")
@click.pass_context
def compare(ctx, disease_key, scenario_a, scenario_b, overrides_a, overrides_b, steps: int, as_json: bool):
    """Compare scenario A with scenario B: risks, drivers and timeline."""
    store = ctx.obj["store"]
    a = _resolve_scenario(scenario_a, overrides_a, store)
    b = _resolve_scenario(scenario_b, overrides_b, store)
    comparison = compare_scenarios(a, b, disease_key, steps)

    if as_json:
        click.echo(json.dumps(comparison.to_dict(), indent=2))
        return

    click.echo(comparison.disease_label)
    click.echo(
        f"A: {format_percent(comparison.risk_a.probability)}  "
        f"B: {format_percent(comparison.risk_b.probability)}  "
        f"Delta: {round_half_up(comparison.delta * 100)}%"
    )
    if comparison.improves:
        click.echo(click.style("Scenario B looks better: risk goes down.", fg="green"))
    else:
        click.echo(click.style("Scenario B increases risk: consider healthier changes.", fg="yellow"))

    click.echo("")
    _echo_table(
        [
            {"feature": entry_a.label, "share A": f"{entry_a.share_percent}%", "share B": f"{entry_b.share_percent}%"}
            for entry_a, entry_b in zip(comparison.importance_a, comparison.importance_b)
        ]
    )
    click.echo("")
    _echo_table(
        [{"step": f"+{point.step}", "risk": format_percent(point.risk)} for point in comparison.timeline]
    )


@main.command(name="save-profile")
@click.argument("name")
@click.option("-s", "--scenario", default="default", show_default=True, help="scenario source")
@click.option("--set", "overrides", multiple=True, callback=_parse_overrides, help="FIELD=VALUE override (repeatable)")
@click.pass_context
def save_profile(ctx, name: str, scenario: str, overrides: dict[str, str]):
    """Save a scenario under NAME (overwrites an existing profile)."""
    store = ctx.obj["store"]
    features = _resolve_scenario(scenario, overrides, store)
    store.save(name, features)
    logger.info(f"Saved profile {name!r} to {store.path}")
    click.echo(f"Saved profile {name!r}")


@main.command(name="show-profile")
@click.argument("name")
@click.pass_context
def show_profile(ctx, name: str):
    """Print a saved profile as JSON."""
    features = ctx.obj["store"].load(name)
    click.echo(json.dumps(features.to_dict(), indent=2))


@main.command(name="profiles")
@click.pass_context
def profiles(ctx):
    """List saved profile names."""
    names = ctx.obj["store"].names()
    if not names:
        click.echo("No saved profiles")
        return
    for name in names:
        click.echo(name)


@main.command(name="import-profiles")
@click.argument("table_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--sheet", "sheet_name", default="0", show_default=True, help="Excel sheet name or index")
@click.option("--strict/--no-strict", default=False, help="Save nothing if any row has errors (default: save the valid rows).")
@click.pass_context
def import_profiles(ctx, table_path: str, sheet_name: str, strict: bool):
    """
    Import one profile per row from a CSV or Excel table.
    The first column holds the profile name.
    """
    store = ctx.obj["store"]
    df = load_profile_table(table_path, int(sheet_name) if sheet_name.isdigit() else sheet_name)

    notepad = create_notepad("profiles")
    mapped = map_profile_table(df, notepad)
    _report_issues(notepad, len(df), len(mapped), strict)

    if strict and notepad.has_errors(include_subsections=True):
        click.echo("Nothing imported (--strict).", err=True)
        sys.exit(1)

    for name, features in mapped.items():
        store.save(name, features)
    logger.info(f"Imported {len(mapped)} profiles from {table_path}")
    click.echo(f"Imported {len(mapped)} profiles into {store.path}")


if __name__ == "__main__":
    main()
