from quarto.rl.self_play.constants import STATS_FILE_NAME
from quarto.rl.self_play.self_play import run_self_play_training


def main():
    print("Quarto self-play training")
    print("=========================")

    # Default configuration, each run in its own timestamped directory
    _, results, run_dir = run_self_play_training(verbose=True)

    print(f"{len(results)} cycles done, statistics written to {run_dir / STATS_FILE_NAME}")


if __name__ == "__main__":
    main()
