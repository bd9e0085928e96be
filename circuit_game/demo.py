"""Simple command line demo for the circuit puzzle logic."""

from pathlib import Path

from .game import LevelLoader, SolutionValidator


def main(level_name: str = "level_04") -> None:
    package_root = Path(__file__).resolve().parent
    level_loader = LevelLoader(package_root / "levels")
    validator = SolutionValidator(level_loader, package_root / "solutions")

    game, verdict = validator.replay(level_name)

    print("=== Circuit Puzzle Demo ===")
    print(f"Level: {game.level.title} (#{game.level.id}, radius {game.level.size})")
    print("Activated components:")
    for component in game.level.components:
        state = "on" if component.coordinate in game.board.activated else "off"
        print(f"  {component.type.value} {component.coordinate.as_tuple}: {state}")
    print(f"Steps taken: {len(game.board.traversed_path)}")
    print(f"Verdict: {verdict.status.value} ({verdict.stars} stars)")


if __name__ == "__main__":
    main()
