HELP_MESSAGE = """\
Movement: NORTH, SOUTH, EAST, WEST (or N, S, E, W). Also UP, DOWN, IN, OUT where applicable.
Items: TAKE to pick up, DROP to put down, INVENTORY (or I) to see what you're carrying.
Looking: LOOK (or L) to see where you are. LOOK AT something to examine it.
Actions: OPEN, UNLOCK, CLIMB, READ, PUT, and more. Try what seems natural.
System: HELP for this message. INFO for game tips. HINT if you're stuck. QUIT to exit. RESTART to start over."""

INFO_MESSAGE = """\
This is an interactive fiction game. Explore, solve puzzles, and uncover the story.
Take your time. Look at things carefully. Try different approaches.
You can't die or get permanently stuck. Experiment freely.
Type HELP for a list of commands."""

HAVE_YOU_PLAYED_BEFORE = "Have you played interactive fiction before?"

NEW_PLAYER_INTRO = """\
Welcome! In this interactive fiction, you type commands to interact with the world.
Try commands like LOOK, TAKE, GO NORTH, or INVENTORY.
Type HELP for a list of commands."""

EXPERIENCED_PLAYER_INTRO = "Welcome back! Let's begin."

RESTART_MESSAGE = "You're back where it all began.\n\n{look}"

NO_HINTS = "There are no hints for this part of the game. Keep exploring!"


class DefaultResponses:
    """
    Every line of text the engine shows a player.

    Subclass and override individual methods to reword or localize a story;
    the engine never builds player-facing text anywhere else.
    """

    # --- MOVEMENT ---
    def cant_go_that_way(self):
        return "You can't go that way."

    def direction_not_understood(self, direction):
        return f"'{direction}' is not a direction I understand."

    def go_where(self):
        return "Which direction do you want to go?"

    # --- LOOK / READ ---
    def look_not_present(self, name):
        return f"You don't see a {name} here."

    def read_what(self):
        return "Read what?"

    def cant_read(self, name):
        return f"There's nothing written on the {name}."

    def read_not_present(self):
        return "There's nothing here to read."

    # --- TAKE ---
    def take_what(self):
        return "Take what?"

    def take_success(self):
        return "Taken."

    def take_nothing_here(self):
        return "There's nothing here to take."

    def take_need_to_specify(self):
        return "You'll need to be more specific about what you want to take."

    def take_already_have(self):
        return "You already have that."

    def take_cant(self, name):
        return f"You can't take the {name}."

    def take_not_in(self, name, container):
        return f"The {name} isn't in the {container}."

    # --- DROP ---
    def drop_what(self):
        return "Drop what?"

    def drop_success(self):
        return "Dropped."

    def drop_carrying_nothing(self):
        return "You're not carrying anything."

    def drop_need_to_specify(self):
        return "You'll need to be more specific about what you want to drop."

    def drop_dont_have(self, name):
        return f"You're not carrying a '{name}'."

    # --- PUT ---
    def put_what(self):
        return "Put what?"

    def put_where(self, name):
        return f"Where do you want to put the {name}?"

    def put_success(self, name, preposition, container):
        return "Done."

    def put_item_not_present(self, name):
        return f"You don't have a {name} and there isn't one here."

    def put_container_not_found(self, name):
        return f"You don't see a {name} here."

    def put_not_a_container(self, name):
        return f"The {name} isn't something you can put things in or on."

    def put_not_accepted(self, container, name):
        return f"The {container} won't hold a {name}."

    def put_container_full(self, name):
        return f"The {name} is full."

    def put_container_closed(self, name):
        return f"The {name} is closed."

    def put_circular(self):
        return "You can't put something inside itself."

    def put_unsupported_preposition(self, preposition):
        return f"You can only put things 'in' or 'on' other things, not '{preposition}'."

    def put_invalid_preposition(self, container, preferred):
        return f"You can only put things {preferred} the {container}."

    # --- UNLOCK / OPEN ---
    def unlock_nothing(self):
        return "There's nothing here that needs unlocking."

    def unlock_cant(self, name):
        return f"The {name} isn't something you can unlock."

    def unlock_need_to_specify(self, name):
        return f"Which {name} do you mean?" if name else "What do you want to unlock?"

    def unlock_not_present(self, name):
        return f"You don't see a {name} here."

    def unlock_success(self, name):
        return f"You unlock the {name}."

    def unlock_already(self, name):
        return f"The {name} is already unlocked."

    def unlock_not_needed(self, name):
        return f"The {name} doesn't have a lock."

    def unlock_no_key(self, name):
        return "You don't have the key."

    def code_prompt(self, name):
        return "Enter the code."

    def code_wrong(self, name):
        return "That's not the right code."

    def open_nothing(self):
        return "There's nothing here to open."

    def open_cant(self, name):
        return f"The {name} isn't something you can open."

    def open_need_to_specify(self, name):
        return f"Which {name} do you mean?" if name else "What do you want to open?"

    def open_not_present(self, name):
        return f"You don't see a {name} here."

    def open_success(self, name):
        return f"You open the {name}."

    def open_already(self, name):
        return f"The {name} is already open."

    def open_locked(self, name):
        return f"The {name} is locked."

    # --- SCENERY INTERACTIONS ---
    def interaction_what(self, verb):
        if verb == 'swim':
            return "Swim where?"
        return f"{verb.capitalize()} what?"

    def interaction_cant(self, verb, name):
        if verb == 'climb':
            return "That's not something you can climb."
        if verb == 'drink':
            return f"The {name} isn't something you can drink."
        if verb == 'swim':
            return f"You can't swim in the {name}."
        return f"{verb.capitalize()}ing the {name} won't accomplish anything."

    def interaction_not_present(self, verb):
        if verb == 'swim':
            return "There's nothing here to swim in."
        return f"There's nothing here to {verb}."

    # --- EAT ---
    def eat_what(self):
        return "Eat what?"

    def eat_nothing_here(self):
        return "There's nothing here to eat."

    def eat_dont_have(self, name):
        return f"You don't have a '{name}' to eat."

    def eat_not_edible(self):
        return "That's not something you can eat."

    def eat_success(self):
        return "Eaten."

    # --- INVENTORY / STATUS ---
    def inventory_empty(self):
        return "You're not carrying anything."

    def inventory(self, listing):
        return f"You are carrying:\n{listing}"

    def status(self, location, item_count, visited_count):
        return (f"Location: {location}\n"
                f"Items carried: {item_count}\n"
                f"Places visited: {visited_count}")

    # --- SYSTEM ---
    def not_understood(self, text):
        return f"I don't understand '{text}'."

    def verb_preposition_invalid(self):
        return "That doesn't make sense."

    def item_not_present(self, name):
        return f"You don't see a '{name}' here."

    def which_one(self, name):
        return f"Which {name} do you mean?"

    def help(self):
        return HELP_MESSAGE

    def info(self):
        return INFO_MESSAGE

    def no_hints(self):
        return NO_HINTS

    def quit_confirmation(self):
        return "Are you sure you want to quit?"

    def quit_cancelled(self):
        return "Okay, continuing."

    def restart_confirmation(self):
        return "Are you sure you want to restart?"

    def restart_cancelled(self):
        return "Okay, continuing."

    def restart(self, look):
        return RESTART_MESSAGE.format(look=look)

    def please_answer(self):
        return "Please answer the question."

    # --- INTRO ---
    def have_you_played_before(self):
        return HAVE_YOU_PLAYED_BEFORE

    def new_player_intro(self):
        return NEW_PLAYER_INTRO

    def experienced_player_intro(self):
        return EXPERIENCED_PLAYER_INTRO
