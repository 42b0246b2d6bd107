"""Calorie estimate command."""

import click

from ..models.ingredients import MILK_CALORIES, SIZE_VOLUMES_ML, CupSize, get_ingredient
from ..models.tea_record import percent_to_label, sweetness_to_percent
from ..utils.calorie_utils import (
    calorie_equivalents,
    calorie_level,
    calories_for_base,
    calories_for_topping,
    estimate_record_calories,
    recommended_exercises,
)
from .base import echo_warning, format_table


@click.command()
@click.option(
    "--size", "-s", type=click.Choice([s.value for s in CupSize]), default="medium", help="Cup size"
)
@click.option("--sweetness", default="50", help="Sugar percent or label, e.g. 半糖")
@click.option("--topping", "-t", "toppings", multiple=True, help="Topping name (repeatable)")
@click.option("--milk", type=click.Choice(list(MILK_CALORIES)), help="Milk type")
@click.option("--drink-calories", type=float, help="Listed calories of a medium catalog drink")
@click.option("--equivalents", "-e", is_flag=True, help="Show food and exercise equivalents")
def calories(size, sweetness, toppings, milk, drink_calories, equivalents):
    """Estimate a drink's calories without logging it.

    Examples:

        teacal calories -s medium --sweetness 半糖 -t 珍珠

        teacal calories -s large --sweetness 0 -t 椰果 -t 布丁 -e
    """
    percent = sweetness_to_percent(sweetness)
    base = calories_for_base(size, percent, milk, drink_calories)

    volume = SIZE_VOLUMES_ML[CupSize(size)]
    rows = [["Base", f"{size} {volume}ml, {percent_to_label(percent)} ({percent}%)", f"{base:.0f}"]]
    for name in toppings:
        if get_ingredient(name) is None:
            echo_warning(f"Unknown topping '{name}' counted as 0 kcal")
        rows.append(["Topping", name, f"{calories_for_topping(name):.0f}"])

    total = estimate_record_calories(size, percent, list(toppings), milk, drink_calories)

    click.echo()
    click.echo(format_table(["Part", "Detail", "kcal"], rows))
    click.echo()
    click.echo(f"Total: {total} kcal ({calorie_level(total)})")

    if equivalents:
        foods, _ = calorie_equivalents(total)
        click.echo()
        click.echo("Same as eating:")
        for food in foods:
            click.echo(f"  - {food.amount:g} {food.unit} {food.name} ({food.weight_grams} g)")
        click.echo()
        click.echo("To burn it off:")
        for exercise in recommended_exercises(total):
            click.echo(f"  - {exercise.name} {exercise.minutes} min")
