def notification_payload(n) -> dict:
    return {
        'id': n.id,
        'type': n.type,
        'title': n.title,
        'message': n.message,
        'data': n.data,
        'isRead': n.is_read,
        'createdAt': n.created_at.isoformat(),
    }
