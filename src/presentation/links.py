"""Viewer URLs and the browser bookmarklet."""

from __future__ import annotations

from urllib.parse import urlencode

VIEWER_PATH = "/api/record"


def viewer_endpoint(base_url: str) -> str:
    return f"{base_url.rstrip('/')}{VIEWER_PATH}"


def record_viewer_url(base_url: str, record_type: str, record_id: str, **extra: str) -> str:
    """Viewer link for one record; ``extra`` adds query parameters (e.g. format)."""
    params = {"recordtype": record_type, "recordid": record_id}
    params.update({key: value for key, value in extra.items() if value is not None})
    return f"{viewer_endpoint(base_url)}?{urlencode(params)}"


# Reads the record type/id from the host page (legacy API globals, then the
# current-record object, then URL patterns) and opens the viewer in a new tab.
_BOOKMARKLET_TEMPLATE = (
    "javascript:(function(){"
    "var recordType='';var recordId='';"
    "try{recordType=nlapiGetRecordType();}catch(e){}"
    "try{recordId=nlapiGetRecordId();}catch(e){}"
    "if(!recordType||!recordId){"
    "try{recordType=currentRecord.type;}catch(e){}"
    "try{recordId=currentRecord.id;}catch(e){}}"
    "if(!recordType||!recordId){"
    "var url=window.location.href;"
    "var recTypeMatch=url.match(/\\/(\\w+)\\.nl\\?/i)||url.match(/record\\/(\\w+)\\//i);"
    "var recIdMatch=url.match(/id=(\\d+)/i)||url.match(/record\\/\\w+\\/(\\d+)/i);"
    "if(recTypeMatch)recordType=recTypeMatch[1];"
    "if(recIdMatch)recordId=recIdMatch[1];}"
    "if(recordType&&recordId){"
    "window.open('{viewer_url}?recordtype='+encodeURIComponent(recordType)"
    "+'&recordid='+encodeURIComponent(recordId),'_blank');"
    "}else{alert('Unable to get record information.');}"
    "})();"
)


def generate_bookmarklet(viewer_url: str) -> str:
    """``javascript:`` URL opening ``viewer_url`` for the record on screen."""
    escaped = viewer_url.replace("\\", "\\\\").replace("'", "\\'")
    return _BOOKMARKLET_TEMPLATE.replace("{viewer_url}", escaped)
