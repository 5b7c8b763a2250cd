from bookprep.emitters.html import HtmlEmitter
from bookprep.emitters.jsondump import JsonEmitter

EMITTERS = {
    "html": HtmlEmitter,
    "json": JsonEmitter,
}

# Used when no mode flag is given
DEFAULT_EMITTER = "json"
