import importlib
import logging
import os
import sys
import time
import uuid

import yaml
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.prompt import Prompt
from rich.text import Text
from rich.theme import Theme

from ifcore.config import load_config, save_config, setup_logging
from ifcore.engine import GameEngine
from ifcore.session import GameState
from ifcore.story import list_stories, load_story_file
from ifcore.world import ConfigurationError

# --- CONFIGURATION ---
PYTHON_STORIES_PACKAGE = "stories.games"

# 1. SETUP THEME
custom_theme = Theme({
    "info": "bold #b0d8e3",       # Pale Cyan
    "text": "default",            # Adaptive
    "dim": "dim",                 # Grey
    "warning": "bold #ffafaf",    # Soft red
    "success": "bold #a3be8c",    # Soft green
})

console = Console(theme=custom_theme)
logger = logging.getLogger(__name__)


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def load_game(config):
    """
    Builds the configured story: a YAML file under stories_dir, or else a
    Python story module in stories/games exposing build_game().
    """
    story = config['story']
    for ext in (".yaml", ".yml"):
        path = os.path.join(config['stories_dir'], story + ext)
        if os.path.exists(path):
            game_map = load_story_file(path)
            break
    else:
        module = importlib.import_module(f"{PYTHON_STORIES_PACKAGE}.{story}")
        game_map = module.build_game()

    if config.get('skip_intro'):
        game_map.skip_intro = True
    return game_map


def show_welcome_screen(config):
    clear_screen()

    welcome_md = Markdown("""
    # IFCORE

    Type what you want to do. The parser does the rest.
    """)

    console.print(Panel(
        welcome_md,
        border_style="info",
        padding=(1, 2),
        width=60
    ))

    console.print("\n[dim]Select an option:[/dim]\n")

    debug_state = "On" if config.get('debug_mode', False) else "Off"
    menu_options = [
        ("1", f"Start Story: {config['story']}"),
        ("S", "Choose Story"),
        ("D", f"Toggle Debug Mode (current: {debug_state})"),
        ("4", "Quit"),
    ]

    for key, label in menu_options:
        console.print(f" [[info]{key}[/info]] {label}")

    print()
    return Prompt.ask(" >", choices=["1", "S", "D", "4"], default="1")


def render(response, is_debug):
    if is_debug:
        console.print(Panel(Text(response.to_json(indent=2), style="dim"),
                            title="[DEBUG: Response]", border_style="dim"))

    if response.game_state == GameState.PLAYING:
        border = "info"
    elif response.game_state in (GameState.WAITING_FOR_UNLOCK_CODE, GameState.WAITING_FOR_OPEN_CODE):
        border = "success"
    else:
        border = "warning"

    # Location text is shown bold, the way the first line of a room reads in print
    text = Text(response.message)
    if response.boldable_text:
        text.highlight_words([response.boldable_text], style="bold")

    title = None
    if response.valid_directions:
        title = "Exits: " + ", ".join(response.valid_directions)
    console.print(Panel(text, title=title, border_style=border))


# ============================================
# GAME LOOP
# ============================================
def start_game(config):
    clear_screen()
    console.print(Panel("[info]LOADING STORY...[/info]", border_style="info"))

    # 1. LOAD STORY
    try:
        game_map = load_game(config)
    except FileNotFoundError as e:
        console.print(Panel(f"[warning]ERROR: Story not found.[/] Missing file: {e}", border_style="warning"))
        time.sleep(3)
        return
    except ModuleNotFoundError:
        console.print(Panel(f"[warning]ERROR: No story called '{config['story']}'.[/]", border_style="warning"))
        time.sleep(3)
        return
    except yaml.YAMLError as e:
        logger.warning("Story %s is not valid YAML: %s", config['story'], e)
        console.print(Panel(f"[warning]YAML STRUCTURE ERROR:[/]\nCheck your story file for indentation or syntax errors.\nDetails: {e}", border_style="warning"))
        time.sleep(5)
        return
    except ConfigurationError as e:
        logger.warning("Story %s cannot be built: %s", config['story'], e)
        console.print(Panel(f"[warning]STORY ERROR:[/]\nThe story cannot be played.\nDetails: {e}", border_style="warning"))
        time.sleep(5)
        return

    # 2. ONE ENGINE, ONE LOCAL SESSION
    engine = GameEngine(game_map)
    session_id = f"local-{uuid.uuid4().hex[:8]}"
    is_debug = config.get('debug_mode', False)

    console.print(Panel(
        f"[bold blue]{game_map.title}[/bold blue]",
        title="STORY STARTED",
        border_style="info"
    ))
    console.print("[dim]Type 'menu' to return to the menu.[/dim]\n")
    render(engine.start_session(session_id), is_debug)

    # 3. THE LOOP
    while True:
        user_input = Prompt.ask("[info]>[/info]")

        if user_input.strip().lower() == "menu":
            break

        response = engine.process_command(session_id, user_input)
        render(response, is_debug)

        if response.exit:
            console.print("\n[dim]Thanks for playing.[/dim]")
            time.sleep(1)
            break

    engine.cleanup_session(session_id)


def choose_story(config):
    stories = list_stories(config['stories_dir'])
    if not stories:
        console.print(f"\n[warning]No stories found in {config['stories_dir']}.[/]")
        time.sleep(2)
        return

    for i, story in enumerate(stories):
        console.print(f" [[info]{i + 1}[/info]] {story}")
    choice = Prompt.ask(" >", choices=[str(i + 1) for i in range(len(stories))], default="1")
    config['story'] = os.path.splitext(stories[int(choice) - 1])[0]
    save_config(config)


# ============================================
# MAIN
# ============================================
def main():
    config = load_config()
    setup_logging(config.get('log_level', 'WARNING'), console)

    def toggle_debug(current_config):
        """Toggles the debug_mode flag in config.yaml."""
        current_config['debug_mode'] = not current_config.get('debug_mode', False)
        save_config(current_config)
        clear_screen()
        console.print(Panel(
            f"[info]DEBUG MODE:[/][bold]{' ON' if current_config['debug_mode'] else ' OFF'}[/bold]",
            border_style="info"
        ))
        time.sleep(1)

    while True:
        # Re-load config to get the latest debug state for the menu label
        config = load_config()
        choice = show_welcome_screen(config)

        if choice == "1":
            start_game(config)
        elif choice.upper() == "S":
            choose_story(config)
        elif choice.upper() == "D":
            toggle_debug(config)
        elif choice == "4":
            console.print("\nGoodbye.")
            sys.exit()


if __name__ == "__main__":
    main()
