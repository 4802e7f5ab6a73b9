from ifcore.dispatcher import FALLBACK
from ifcore.story import build_story

STORY_ID = "cottage"

STORY_DATA = {
    'title': 'The Cottage',
    'start_room': 'Garden',
    'intro': {
        'message': 'A lane, a hedge, a cottage with its curtains drawn.',
    },
    'scenes': [
        {
            'id': 'Garden',
            'description': 'You are in an overgrown garden. A gravel path runs north to a porch. '
                           'An old oak tree leans over a stone bench.',
            'short': 'The overgrown garden.',
            'scenery': [
                {'name': 'oak tree', 'aliases': ['tree', 'oak'],
                 'responses': {'look': 'Its lowest branch hangs just out of reach.',
                               'climb': 'You get halfway up, think better of it and climb back down.'}},
                {'name': 'stone bench', 'aliases': ['bench'], 'container': True,
                 'responses': {'look': 'Moss has taken most of the bench.',
                               'take': 'It weighs more than you do.'}},
                {'name': 'pond', 'responses': {'look': 'Green water, one lily pad.',
                                               'drink': 'You think about the green and decide against it.',
                                               'swim': 'It is barely knee deep.'}},
            ],
            'contents': [
                {'name': 'trowel', 'description': 'A rusty trowel with a split handle.'},
            ],
            'hidden': [
                {'name': 'clay pipe', 'aliases': ['pipe'],
                 'description': 'An old clay pipe, the bowl cracked.',
                 'revealed': 'A clay pipe sticks out of the fresh earth.'},
            ],
            'exits': {'north': 'Porch'},
        },
        {
            'id': 'Porch',
            'description': 'A sagging wooden porch. The front door to the north is shut.',
            'short': 'The porch.',
            'lock': {
                'target': ['front door', 'door'],
                'key': 'brass key',
                'opens': {'north': 'Hall'},
                'open_description': 'A sagging wooden porch. The front door stands open to the north.',
            },
            'scenery': [
                {'name': 'doormat', 'aliases': ['mat'],
                 'responses': {'look': 'WELCOME, it says, without much conviction.',
                               'take': 'It is nailed to the boards.'},
                 'contents': [
                     {'name': 'brass key', 'aliases': ['key'],
                      'description': 'A small brass key, warm from the sun.'},
                 ]},
            ],
            'exits': {'south': 'Garden'},
        },
        {
            'id': 'Hall',
            'description': 'A narrow hall smelling of lavender. The porch is back to the south.',
            'short': 'The hall.',
            'contents': [
                {'name': 'lockbox', 'aliases': ['box'], 'kind': 'lockbox', 'code': '1234',
                 'description': 'A steel lockbox with a four-digit dial.',
                 'contents': [
                     {'name': 'silver coin', 'aliases': ['coin'],
                      'description': 'A silver coin stamped with a hare.'},
                 ]},
                {'name': 'note', 'aliases': ['paper'],
                 'description': 'A folded note.', 'text': 'Same as the gate: 1234.'},
                {'name': 'apple', 'kind': 'edible', 'description': 'A red apple.'},
                {'name': 'canvas bag', 'aliases': ['bag'], 'kind': 'container', 'capacity': 3,
                 'description': 'A canvas shopping bag.'},
            ],
            'exits': {'south': 'Porch'},
        },
    ],
    'hints': {
        'Garden': ['The porch is just north.',
                   'Doors on porches are often locked.',
                   'Go north and look at the doormat.'],
        'Porch': ['People hide keys in obvious places.',
                  'Look at the doormat.',
                  'Take the key from the doormat, then unlock the door.'],
        'Hall': ['Something in here has writing on it.',
                 'Read the note.',
                 'Type UNLOCK LOCKBOX and enter 1234.'],
    },
}


# ==========================================
# CUSTOM COMMANDS
# ==========================================

def knock(session, command, context):
    location = session.current_location
    if location.name != 'Porch':
        return "You knock on nothing in particular."
    if location.open:
        return "The door is already open."
    return "You knock. Nobody answers."


def listen(session, command, context):
    if session.current_location.name == 'Garden':
        return "A blackbird, somewhere in the oak."
    return "The cottage is very quiet."


def dig(session, command, context):
    if not context.player_has_item(session, 'trowel'):
        return "You have nothing to dig with."
    location = context.current_location(session)
    if location.name != 'Garden':
        return "The ground here is too hard."
    if location.reveal_item('clay pipe'):
        return "You turn over the soft earth by the bench and find a clay pipe."
    return "Worms. Nothing else."


def put(session, command, context):
    # Only the tree has an opinion; everything else is a normal put
    if command.first_direct_object == 'apple' and command.first_indirect_object in ('tree', 'oak tree'):
        return "The apple does not want to go back."
    return FALLBACK


COMMANDS = {
    'knock': knock,
    'listen': listen,
    'dig': dig,
    'put': put,
}


def build_game():
    return build_story(STORY_DATA, COMMANDS)
