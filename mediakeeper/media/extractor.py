"""Extract archivable media files from a message."""

from mediakeeper.bus.events import MediaDescriptor, MediaKind, Message

PHOTO_MIME_TYPE = "image/jpeg"  # Telegram photos are always JPEG
DEFAULT_VIDEO_MIME_TYPE = "video/mp4"


def extract_media_files(message: Message) -> list[MediaDescriptor]:
    """Return the media descriptors of *message* in photo, video, document order.

    Photo, video and document are independent channels, so a single message
    can yield anywhere from zero to three descriptors.
    """
    media_files: list[MediaDescriptor] = []
    attachments = message.attachments

    # The photo array is ordered smallest to largest
    if attachments.photo:
        largest = attachments.photo[-1]
        media_files.append(MediaDescriptor(
            source_ref=largest.file_id,
            file_name=f"photo_{message.id}.jpg",
            mime_type=PHOTO_MIME_TYPE,
            kind=MediaKind.PHOTO,
            size_bytes=largest.file_size or None,
        ))

    if attachments.video:
        video = attachments.video
        media_files.append(MediaDescriptor(
            source_ref=video.file_id,
            file_name=video.file_name or f"video_{message.id}.mp4",
            mime_type=video.mime_type or DEFAULT_VIDEO_MIME_TYPE,
            kind=MediaKind.VIDEO,
            size_bytes=video.file_size or None,
        ))

    # Oversized images and videos arrive as documents to skip recompression
    document = attachments.document
    if document and document.mime_type:
        is_video = document.mime_type.startswith("video/")
        is_image = document.mime_type.startswith("image/")
        if is_video or is_image:
            media_files.append(MediaDescriptor(
                source_ref=document.file_id,
                file_name=document.file_name or f"document_{message.id}",
                mime_type=document.mime_type,
                kind=MediaKind.VIDEO if is_video else MediaKind.PHOTO,
                size_bytes=document.file_size or None,
            ))

    return media_files
