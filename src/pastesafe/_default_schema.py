#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Built-in field tables for the page builder's stock widgets.

Plain data consumed by ``SchemaRegistry.from_mapping``. Fields not listed
here resolve to ``plainText``; only fields that legitimately carry markup,
URLs, CSS or colours need an entry.
"""

_LINK = "url"
_MEDIA = "url"

_TAB_ITEM = {"tab_title": "plainText", "tab_content": "html"}

DEFAULT_SCHEMA_DATA = {
    "common": {
        # Advanced tab
        "_element_id": "plainText",
        "_css_classes": "plainText",
        "css_classes": "plainText",
        "custom_css": "css",
        "_column_size": "number",
        "_inline_size": "number",
        # Links and media controls ({"url": ..., "id": ..., "is_external": ...})
        "url": "url",
        "link": _LINK,
        "image": _MEDIA,
        "*_link": _LINK,
        "*_url": "url",
        "*_image": _MEDIA,
        # Colours
        "color": "color",
        "*_color": "color",
        "*_color_stop": "number",
        # Sliders and dimensions ({"unit": "px", "size": 10})
        "*_size": "number",
    },
    "widgets": {
        "heading": {"title": "plainText", "link": _LINK},
        "text-editor": {"editor": "html"},
        "html": {"html": "html"},
        "button": {"text": "plainText", "link": _LINK, "button_css_id": "plainText"},
        "image": {"image": _MEDIA, "caption": "plainText", "link": _LINK},
        "video": {
            "youtube_url": "url",
            "vimeo_url": "url",
            "dailymotion_url": "url",
            "videopress_url": "url",
            "hosted_url": _MEDIA,
            "external_url": _LINK,
        },
        "audio": {"link": _LINK},
        "icon": {"link": _LINK},
        "icon-box": {"title_text": "plainText", "description_text": "html", "link": _LINK},
        "image-box": {"image": _MEDIA, "title_text": "plainText", "description_text": "html", "link": _LINK},
        "icon-list": {"icon_list": {"text": "plainText", "link": _LINK}},
        "tabs": {"tabs": _TAB_ITEM},
        "accordion": {"tabs": _TAB_ITEM},
        "toggle": {"tabs": _TAB_ITEM},
        "testimonial": {
            "testimonial_content": "html",
            "testimonial_name": "plainText",
            "testimonial_job": "plainText",
            "testimonial_image": _MEDIA,
            "link": _LINK,
        },
        "price-table": {
            "heading": "plainText",
            "sub_heading": "plainText",
            "features_list": {"item_text": "plainText"},
            "button_text": "plainText",
            "link": _LINK,
            "footer_additional_info": "html",
            "ribbon_title": "plainText",
        },
        "slides": {
            "slides": {
                "heading": "plainText",
                "description": "html",
                "button_text": "plainText",
                "link": _LINK,
                "background_image": _MEDIA,
            },
        },
        "social-icons": {"social_icon_list": {"link": _LINK}},
        "spacer": {"space": "number"},
        "divider": {"text": "plainText"},
        "countdown": {"message_after_expire": "html", "expire_redirect_url": _LINK},
        "alert": {"alert_title": "plainText", "alert_description": "html"},
        "form": {
            "form_name": "plainText",
            "form_fields": {"field_label": "plainText", "placeholder": "plainText", "field_html": "html"},
            "button_text": "plainText",
            "success_message": "plainText",
            "error_message": "plainText",
            "redirect_to": "url",
        },
        "image-gallery": {"wp_gallery": {"id": "number", "url": "url"}},
        "gallery": {"gallery": {"id": "number", "url": "url"}},
    },
}
