"""Bilingual (Spanish/English) keyword tables for the description analyzer.

Keys are cleaned, lower-cased tokens. Singular and plural forms are
separate keys. The first candidate of each value is the one used when
suggesting a missing endpoint.
"""

from types import MappingProxyType

ACTION_METHODS = MappingProxyType({
    # create
    "crear": ("POST",),
    "agregar": ("POST",),
    "añadir": ("POST",),
    "nuevo": ("POST",),
    "nueva": ("POST",),
    "registrar": ("POST",),
    "generar": ("POST",),
    "create": ("POST",),
    "add": ("POST",),
    "new": ("POST",),
    "register": ("POST",),
    "generate": ("POST",),
    # read
    "obtener": ("GET",),
    "listar": ("GET",),
    "ver": ("GET",),
    "mostrar": ("GET",),
    "buscar": ("GET",),
    "consultar": ("GET",),
    "get": ("GET",),
    "list": ("GET",),
    "view": ("GET",),
    "show": ("GET",),
    "search": ("GET",),
    "fetch": ("GET",),
    "find": ("GET",),
    # update
    "actualizar": ("PUT", "PATCH"),
    "modificar": ("PUT", "PATCH"),
    "editar": ("PUT", "PATCH"),
    "cambiar": ("PUT", "PATCH"),
    "update": ("PUT", "PATCH"),
    "modify": ("PUT", "PATCH"),
    "edit": ("PUT", "PATCH"),
    "change": ("PUT", "PATCH"),
    # delete
    "eliminar": ("DELETE",),
    "borrar": ("DELETE",),
    "quitar": ("DELETE",),
    "remover": ("DELETE",),
    "delete": ("DELETE",),
    "remove": ("DELETE",),
})

ENTITY_PATHS = MappingProxyType({
    "usuario": ("users", "user"),
    "usuarios": ("users",),
    "user": ("users", "user"),
    "users": ("users",),
    "lead": ("leads", "lead"),
    "leads": ("leads",),
    "cliente": ("clients", "customers", "client"),
    "clientes": ("clients", "customers"),
    "client": ("clients", "client"),
    "clients": ("clients",),
    "customer": ("customers", "customer"),
    "customers": ("customers",),
    "cola": ("queues", "queue"),
    "colas": ("queues",),
    "queue": ("queues", "queue"),
    "queues": ("queues",),
    "agente": ("agents", "agent"),
    "agentes": ("agents",),
    "agent": ("agents", "agent"),
    "agents": ("agents",),
    "auditoría": ("audits", "auditor"),
    "auditoria": ("audits", "auditor"),
    "audit": ("audits", "audit"),
    "audits": ("audits",),
    "reporte": ("reports", "report"),
    "reportes": ("reports",),
    "report": ("reports", "report"),
    "reports": ("reports",),
    "campaña": ("campaigns", "campaign", "campana"),
    "campana": ("campaigns", "campaign", "campana"),
    "campaign": ("campaigns", "campaign"),
    "campaigns": ("campaigns",),
    "producto": ("products", "product"),
    "productos": ("products",),
    "product": ("products", "product"),
    "products": ("products",),
    "asistente": ("assistants", "assistant"),
    "asistentes": ("assistants",),
    "assistant": ("assistants", "assistant"),
    "assistants": ("assistants",),
    "transcripción": ("transcriptions", "transcription"),
    "transcripcion": ("transcriptions", "transcription"),
    "transcription": ("transcriptions", "transcription"),
    "transcriptions": ("transcriptions",),
    "configuración": ("settings", "config", "options"),
    "configuracion": ("settings", "config", "options"),
    "settings": ("settings",),
    "config": ("config",),
    "options": ("options",),
})
