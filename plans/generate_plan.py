#!/usr/bin/env python3
"""
Plan Generator - Builds a training plan from the command line

Usage:
    python generate_plan.py --distance Marathon --goal 4:00:00 --race-date 2027-03-07 \
        --experience intermediate --weekly-km 40 --longest-run 16 --days 5
    python generate_plan.py --distance 10K --goal 50:00 --race-date 2027-01-10 \
        --experience beginner --weekly-km 20 --longest-run 8 --format html --open

Inputs go through the same validation as the API. JSON goes to stdout unless
--output is given; HTML is written to plans/generated/{name}.html by default.
"""

import argparse
import json
import sys
from datetime import date, datetime
from html import escape
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "apps" / "api"))

from core.logging import setup_logging  # noqa: E402
from services.plan_builder import (  # noqa: E402
    ConfigService,
    Distance,
    ExperienceLevel,
    GoalSelection,
    InputValidator,
    LongRunDay,
    PlanGenerator,
    PlanInputs,
    ProgressionPlanner,
    RunnerProfile,
    TrainingPlan,
    TrainingPreferences,
    WorkoutType,
    seconds_to_time,
)
from services.plan_builder.pace_table import clock_to_seconds  # noqa: E402

# Workout type colors for display
WORKOUT_COLORS = {
    "easy": {"bg": "#00ba7c", "text": "#000"},
    "long": {"bg": "#1d9bf0", "text": "#fff"},
    "tempo": {"bg": "#ff7a00", "text": "#000"},
    "intervals": {"bg": "#f91880", "text": "#fff"},
    "hills": {"bg": "#dc2626", "text": "#fff"},
    "fartlek": {"bg": "#ff9a40", "text": "#000"},
    "recovery": {"bg": "#536471", "text": "#fff"},
    "race_pace": {"bg": "#7856ff", "text": "#fff"},
    "rest": {"bg": "#2f3336", "text": "#8b98a5"},
    "cross_training": {"bg": "#4a5568", "text": "#fff"},
}

PHASE_COLORS = {
    "base": "#00ba7c",
    "build": "#ff7a00",
    "peak": "#dc2626",
    "taper": "#7856ff",
}

DEFAULT_WORKOUTS = [WorkoutType.EASY.value, WorkoutType.LONG.value, WorkoutType.TEMPO.value]


def build_inputs(args: argparse.Namespace, today: date = None) -> PlanInputs:
    """Turn parsed arguments into PlanInputs (weeks default to the recommended length)."""
    distance = Distance(args.distance)
    experience = ExperienceLevel(args.experience)
    race_date = date.fromisoformat(args.race_date)

    hours, remainder = divmod(clock_to_seconds(args.goal), 3600)
    minutes, seconds = divmod(remainder, 60)

    weeks = args.weeks
    if weeks is None:
        planner = ProgressionPlanner(ConfigService.get_policy())
        weeks = planner.recommended_weeks(experience, distance, race_date, today)

    return PlanInputs(
        goal=GoalSelection(
            distance=distance,
            goal_hours=hours,
            goal_minutes=minutes,
            goal_seconds=seconds,
            race_date=race_date,
        ),
        profile=RunnerProfile(
            experience_level=experience,
            current_weekly_km=args.weekly_km,
            longest_recent_run_km=args.longest_run,
            available_weeks=weeks,
        ),
        preferences=TrainingPreferences(
            training_days_per_week=args.days,
            long_run_day=LongRunDay(args.long_run_day),
            include_cross_training=args.cross_training,
            preferred_workouts=frozenset(WorkoutType(w) for w in args.workouts),
        ),
    )


def generate_html(plan: TrainingPlan) -> str:
    """Generate HTML calendar for a plan"""
    title = (
        f"{plan.distance.value} Training Plan - {plan.experience_level.value.title()} | "
        f"Goal {seconds_to_time(plan.goal_time_seconds)} | {plan.total_weeks} Weeks"
    )

    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>
        :root {{
            --bg-dark: #0f1419;
            --bg-card: #1a1f26;
            --bg-week: #232a33;
            --text-primary: #e7e9ea;
            --text-secondary: #8b98a5;
            --text-muted: #536471;
            --accent-blue: #1d9bf0;
            --border: #2f3336;
        }}
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: var(--bg-dark);
            color: var(--text-primary);
            line-height: 1.5;
            padding: 20px;
        }}
        .container {{ max-width: 1400px; margin: 0 auto; }}
        header {{ text-align: center; margin-bottom: 24px; padding-bottom: 16px; border-bottom: 1px solid var(--border); }}
        h1 {{ font-size: 1.8rem; font-weight: 700; margin-bottom: 6px; }}
        .subtitle {{ color: var(--text-secondary); font-size: 1rem; }}
        .calendar {{ display: grid; gap: 5px; }}
        .week-row {{
            display: grid;
            grid-template-columns: 80px 60px repeat(7, 1fr);
            gap: 4px;
            padding: 6px;
            background: var(--bg-week);
            border-radius: 6px;
            border-left: 4px solid transparent;
        }}
        .week-header {{ display: flex; flex-direction: column; justify-content: center; }}
        .week-num {{ font-weight: 700; font-size: 0.85rem; }}
        .week-phase {{ font-size: 0.6rem; color: var(--text-muted); text-transform: uppercase; }}
        .week-volume {{ display: flex; flex-direction: column; justify-content: center; align-items: center; background: var(--bg-card); border-radius: 5px; }}
        .volume-value {{ font-weight: 700; font-size: 0.95rem; color: var(--accent-blue); }}
        .volume-label {{ font-size: 0.55rem; color: var(--text-muted); text-transform: uppercase; }}
        .day-cell {{ background: var(--bg-card); border-radius: 4px; padding: 5px; min-height: 55px; display: flex; flex-direction: column; gap: 2px; }}
        .day-cell.rest-day {{ background: var(--bg-dark); border: 1px dashed var(--border); }}
        .day-label {{ font-size: 0.55rem; color: var(--text-muted); text-transform: uppercase; }}
        .workout-type {{ font-weight: 600; font-size: 0.65rem; padding: 2px 4px; border-radius: 3px; width: fit-content; }}
        .workout-detail {{ font-size: 0.65rem; color: var(--text-secondary); line-height: 1.2; }}
        .summary {{ margin-top: 20px; padding: 14px; background: var(--bg-card); border-radius: 10px; }}
        .summary-grid {{ display: grid; grid-template-columns: repeat(auto-fit, minmax(120px, 1fr)); gap: 10px; }}
        .summary-item {{ background: var(--bg-week); padding: 10px; border-radius: 6px; }}
        .summary-item .label {{ font-size: 0.65rem; color: var(--text-muted); text-transform: uppercase; }}
        .summary-item .value {{ font-size: 1.1rem; font-weight: 700; }}
        footer {{ text-align: center; margin-top: 20px; color: var(--text-muted); font-size: 0.75rem; }}
    </style>
</head>
<body>
    <div class="container">
        <header>
            <h1>{escape(plan.distance.value)} Training Plan</h1>
            <p class="subtitle">{escape(title)}</p>
        </header>
        <div class="calendar">
"""

    for week in plan.weeks:
        phase = week.phase.value
        html += f"""
            <div class="week-row" style="border-left-color: {PHASE_COLORS.get(phase, '#536471')};" title="{escape(week.notes)}">
                <div class="week-header">
                    <span class="week-num">Week {week.week_number}</span>
                    <span class="week-phase">{phase}</span>
                </div>
                <div class="week-volume">
                    <span class="volume-value">{week.weekly_volume_km:g}</span>
                    <span class="volume-label">km</span>
                </div>
"""
        for workout in week.workouts:
            w_type = workout.type.value
            colors = WORKOUT_COLORS.get(w_type, WORKOUT_COLORS["easy"])
            day_class = "day-cell rest-day" if workout.is_rest else "day-cell"
            detail = workout.description
            if workout.notes:
                detail = f"{detail} {workout.notes}"

            html += f"""
                <div class="{day_class}">
                    <span class="day-label">{workout.day_name[:3]}</span>
                    <span class="workout-type" style="background: {colors['bg']}; color: {colors['text']};">{escape(workout.title)}</span>
                    <span class="workout-detail">{escape(detail)}</span>
                </div>
"""
        html += "            </div>\n"

    html += f"""
        </div>

        <div class="summary">
            <div class="summary-grid">
                <div class="summary-item">
                    <div class="label">Peak Volume</div>
                    <div class="value">{plan.peak_volume_km:g} km</div>
                </div>
                <div class="summary-item">
                    <div class="label">Total Distance</div>
                    <div class="value">~{plan.total_distance_km:g} km</div>
                </div>
                <div class="summary-item">
                    <div class="label">Quality Sessions</div>
                    <div class="value">{plan.quality_session_count}</div>
                </div>
                <div class="summary-item">
                    <div class="label">Race Day</div>
                    <div class="value">{plan.race_date.isoformat() if plan.race_date else '-'}</div>
                </div>
            </div>
        </div>

        <footer>
            <p>Training Plan | Generated {datetime.now().strftime('%Y-%m-%d')}</p>
        </footer>
    </div>
</body>
</html>
"""

    return html


def save_output(content: str, path: Path) -> Path:
    """Write rendered plan to disk"""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a periodized running plan")
    parser.add_argument("--distance", required=True, choices=[d.value for d in Distance])
    parser.add_argument("--goal", required=True, help="Goal finish time (H:MM:SS or MM:SS)")
    parser.add_argument("--race-date", required=True, help="Race date (YYYY-MM-DD)")
    parser.add_argument("--experience", required=True, choices=[e.value for e in ExperienceLevel])
    parser.add_argument("--weekly-km", type=float, required=True, help="Current weekly volume in km")
    parser.add_argument("--longest-run", type=float, required=True, help="Longest recent run in km")
    parser.add_argument("--weeks", type=int, help="Plan length (default: recommended for the race date)")
    parser.add_argument("--days", type=int, default=4, help="Training days per week (3-7)")
    parser.add_argument("--long-run-day", default=LongRunDay.SUNDAY.value, choices=[d.value for d in LongRunDay])
    parser.add_argument("--cross-training", action="store_true", help="Suggest cross training on rest days")
    parser.add_argument(
        "--workouts",
        nargs="+",
        default=DEFAULT_WORKOUTS,
        choices=[w.value for w in WorkoutType],
        help="Preferred workout types",
    )
    parser.add_argument("--seed", type=int, help="Seed for the easy/recovery draw")
    parser.add_argument("--rules", help="YAML file with plan policy overrides")
    parser.add_argument("--format", default="json", choices=["json", "html"])
    parser.add_argument("--output", help="Output file path")
    parser.add_argument("--open", action="store_true", help="Open HTML in browser after generation")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_format="text", stream=sys.stderr)

    if args.rules:
        ConfigService.configure(args.rules)

    try:
        inputs = build_inputs(args)
    except ValueError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 2

    errors = InputValidator(ConfigService.get_policy()).validate_inputs(inputs)
    if errors:
        for step, field_errors in errors.items():
            for field, message in field_errors.items():
                print(f"[{step}] {field}: {message}", file=sys.stderr)
        return 1

    plan = PlanGenerator(seed=args.seed).generate(inputs)

    if args.format == "json":
        content = json.dumps(plan.to_dict(), indent=2)
        if not args.output:
            print(content)
            return 0
        output_path = save_output(content, Path(args.output))
    else:
        name = f"{plan.distance.value.lower()}_{plan.experience_level.value}_{plan.total_weeks}w"
        default_path = Path(__file__).parent / "generated" / f"{name}.html"
        output_path = save_output(generate_html(plan), Path(args.output) if args.output else default_path)

    print(f"Saved to: {output_path}", file=sys.stderr)

    if args.open and args.format == "html":
        import webbrowser
        webbrowser.open(str(output_path))

    return 0


if __name__ == "__main__":
    sys.exit(main())
