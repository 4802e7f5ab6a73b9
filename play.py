import os
import sys

from rich.prompt import Prompt

from ifcore.config import load_config, setup_logging
from ifcore.story import list_stories
from main import console, start_game


def pick_story(stories, choice):
    """
    Resolves a menu choice against story file names.

    A number picks by position, anything else is a partial name match.
    Returns (file_name, None) or (None, reason).
    """
    choice = choice.strip().lower()
    if choice.isdigit():
        idx = int(choice) - 1
        if 0 <= idx < len(stories):
            return stories[idx], None
        return None, "Invalid selection."

    matches = [s for s in stories if choice in s.lower()]
    if len(matches) == 1:
        return matches[0], None
    if len(matches) > 1:
        return None, f"Ambiguous: {', '.join(matches)}"
    return None, "No match found."


def main():
    config = load_config()
    setup_logging(config.get('log_level', 'WARNING'), console)

    stories = list_stories(config['stories_dir'])
    if not stories:
        console.print(f"[warning]No stories found in {config['stories_dir']}.[/]")
        return

    # python play.py lighthouse
    pending = sys.argv[1] if len(sys.argv) > 1 else None

    while True:
        if pending is None:
            console.print("\n[info]Available Stories:[/info]")
            for i, story in enumerate(stories):
                console.print(f" [[info]{i + 1}[/info]] {story}")
            try:
                pending = Prompt.ask("\nSelect a story (or 'quit')")
            except KeyboardInterrupt:
                console.print("\nExiting.")
                break

        choice, pending = pending, None
        if not choice.strip():
            continue
        if choice.strip().lower() == 'quit':
            console.print("Goodbye.")
            break

        selected, reason = pick_story(stories, choice)
        if selected is None:
            console.print(f"[warning]{reason}[/]")
            continue

        config['story'] = os.path.splitext(selected)[0]
        start_game(config)


if __name__ == "__main__":
    main()
