# core/normalizers.py
"""
Normaliza los registros del backend (snake_case REST o camelCase GraphQL)
a la forma que usan las páginas.
"""
from __future__ import annotations

from typing import Any, Dict, List


def _primero(d: Dict[str, Any], *claves, default=None):
    for c in claves:
        v = d.get(c)
        if v not in (None, ""):
            return v
    return default


def _lista(data) -> List[Dict[str, Any]]:
    if isinstance(data, dict):
        # algunos endpoints envuelven la lista: {"data": [...]} / {"items": [...]}
        for clave in ("data", "items", "results"):
            if isinstance(data.get(clave), list):
                return data[clave]
        return []
    return [x for x in (data or []) if isinstance(x, dict)]


def normalizar_cliente(c: Dict[str, Any]) -> Dict[str, Any]:
    c = c or {}
    return {
        "id_cliente": _primero(c, "id_cliente", "idCliente", "id"),
        "nombre_completo": _primero(c, "nombre_completo", "nombreCompleto", default=""),
        "contacto_email": _primero(c, "contacto_email", "contactoEmail", default=""),
        "contacto_tel": _primero(c, "contacto_tel", "contactoTel", default=""),
        "direccion": _primero(c, "direccion", default=""),
        "fecha_creacion": _primero(c, "fecha_creacion", "fecha_registro", "fechaRegistro", "fechaCreacion"),
    }


def normalizar_expediente(x: Dict[str, Any]) -> Dict[str, Any]:
    x = x or {}
    id_cliente = _primero(x, "id_cliente", "idCliente")
    cliente = x.get("cliente") if isinstance(x.get("cliente"), dict) else {}
    cliente_id = _primero(cliente, "id_cliente", "idCliente", default=id_cliente)
    return {
        "id_expediente": _primero(x, "id_expediente", "idExpediente", "id"),
        "id_cliente": cliente_id,
        # vínculo con el cliente tal como se muestra en la tabla
        "cliente": cliente_id if cliente_id is not None else "-",
        "titulo": _primero(x, "titulo", default=""),
        "descripcion": _primero(x, "descripcion", default=""),
        "estado": _primero(x, "estado", default=""),
        "fecha_inicio": _primero(x, "fecha_inicio", "fechaInicio"),
        "fecha_cierre": _primero(x, "fecha_cierre", "fechaCierre"),
        "fecha_creacion": _primero(x, "fecha_creacion", "fechaCreacion"),
        "fecha_actualizacion": _primero(x, "fecha_actualizacion", "fechaActualizacion"),
    }


def normalizar_nota(n: Dict[str, Any]) -> Dict[str, Any]:
    n = n or {}
    return {
        "id_nota": _primero(n, "id_nota", "id", "idNota"),
        "id_expediente": _primero(n, "id_expediente", "idExpediente"),
        "contenido": _primero(n, "contenido", default=""),
        "tipo": _primero(n, "tipo"),
        "fecha_registro": _primero(n, "fecha_registro", "fecha", "createdAt", "fechaCreacion"),
    }


def normalizar_plazo(p: Dict[str, Any]) -> Dict[str, Any]:
    p = p or {}
    return {
        "id_plazo": _primero(p, "id_plazo", "id", "idPlazo"),
        "id_expediente": _primero(p, "id_expediente", "idExpediente"),
        "descripcion": _primero(p, "descripcion", default=""),
        "fecha_vencimiento": _primero(p, "fecha_vencimiento", "fechaVencimiento"),
        "cumplido": bool(p.get("cumplido")),
        "fecha_cumplimiento": _primero(p, "fecha_cumplimiento", "fechaCumplimiento"),
    }


def normalizar_documento(d: Dict[str, Any]) -> Dict[str, Any]:
    d = d or {}
    return {
        "doc_id": _primero(d, "doc_id", "docId", "id"),
        "filename": _primero(d, "filename", default=""),
        "size": _primero(d, "size"),
        "id_cliente": _primero(d, "id_cliente", "idCliente"),
        "id_expediente": _primero(d, "id_expediente", "idExpediente"),
        "created_at": _primero(d, "created_at", "createdAt"),
    }


def normalizar_lista(data, fn) -> List[Dict[str, Any]]:
    return [fn(x) for x in _lista(data)]

