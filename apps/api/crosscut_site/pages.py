from __future__ import annotations

from urllib.parse import quote

from markupsafe import Markup

from .config import SiteConfig
from .domain.entities import DailyNote, NoteNavigation, parse_note_date
from .markdown_render import render_markdown


def daily_notes_page(site: SiteConfig, dates: list[str]) -> str:
    entries = Markup("").join(_daily_note_item(date) for date in dates)
    return page(
        site,
        "Daily Notes",
        Markup("<h2>Daily Notes</h2>{explainer}<ol class=\"m-8\">{entries}</ol>").format(
            explainer=_daily_notes_explainer(site),
            entries=entries,
        ),
    )


def single_daily_note_page(site: SiteConfig, note: DailyNote, dates: list[str]) -> str:
    name_explainer = Markup("")
    if published_before_rename(site, note.date):
        rename_date = site.rename_date.isoformat()
        name_explainer = box(
            Markup(
                "<p>This note was published {link}! If it refers to \"{former}\", "
                "that is the old name, just so you know.</p>"
            ).format(
                link=link(f"/daily/{rename_date}", f"before {site.site_name} was called {site.site_name}"),
                former=site.former_name,
            )
        )

    # Output of the sanitizing renderer is trusted as-is.
    body = Markup(render_markdown(note.content_markdown))

    return page(
        site,
        f"Daily Note - {note.date}",
        Markup(
            "<h2>Daily Note - {date}</h2>"
            "{explainer}"
            "{name_explainer}"
            "<div class=\"my-8\">"
            "<nav>{back}</nav>"
            "<main class=\"prose\">{body}</main>"
            "<nav class=\"grid grid-cols-2\">{navigation}</nav>"
            "</div>"
        ).format(
            date=note.date,
            explainer=_daily_notes_explainer(site),
            name_explainer=name_explainer,
            back=link("/daily", "< back to list"),
            body=body,
            navigation=_daily_note_navigation(note_navigation(note.date, dates)),
        ),
    )


def not_found_page(site: SiteConfig, path: str) -> str:
    return page(
        site,
        "Not Found",
        Markup("<h2>Not Found</h2>{content}").format(
            content=box(
                Markup("<p>There is nothing at <code>{path}</code>. Maybe try the {link}?</p>").format(
                    path=path,
                    link=link("/daily", "list of daily notes"),
                )
            ),
        ),
    )


def published_before_rename(site: SiteConfig, date: str) -> bool:
    published = parse_note_date(date)
    return published is not None and published < site.rename_date


def note_navigation(date: str, dates: list[str]) -> NoteNavigation:
    """Neighbours of `date` in a newest-first list of note dates.

    `previous` is the older note, `next` the newer one.
    """
    try:
        index = dates.index(date)
    except ValueError:
        # Note vanished from the listing between reading it and listing the directory.
        return NoteNavigation(previous=None, next=None)

    previous = dates[index + 1] if index + 1 < len(dates) else None
    next_ = dates[index - 1] if index > 0 else None
    return NoteNavigation(previous=previous, next=next_)


def _daily_note_item(date: str) -> Markup:
    return Markup("<li class=\"my-4 font-bold text-lg\">{link}</li>").format(
        link=_daily_note_link(date, date),
    )


def _daily_note_navigation(navigation: NoteNavigation) -> Markup:
    parts = []
    if navigation.previous:
        parts.append(
            Markup("<span class=\"col-1 justify-self-start\">{link}</span>").format(
                link=_daily_note_link(navigation.previous, "<< previous note"),
            )
        )
    if navigation.next:
        parts.append(
            Markup("<span class=\"col-2 justify-self-end\">{link}</span>").format(
                link=_daily_note_link(navigation.next, "next note >>"),
            )
        )
    return Markup("").join(parts)


def _daily_note_link(date: str, label: str) -> Markup:
    return link(f"/daily/{date}", label)


def _daily_notes_explainer(site: SiteConfig) -> Markup:
    return box(
        Markup(
            "<p class=\"prose\">Hey, I'm {first_name}! These are my daily notes on {project}, "
            "the programming language I'm creating. If you have any questions, comments, "
            "or feedback, please {contact}!</p>"
        ).format(
            first_name=site.author.split()[0],
            project=link(site.project_url, site.site_name),
            contact=email_link(site, "get in touch"),
        )
    )


def box(content: Markup) -> Markup:
    return Markup("<div class=\"m-4 p-4 rounded font-sm bg-slate-200\">{content}</div>").format(content=content)


def email_link(site: SiteConfig, text: str) -> Markup:
    recipient = quote(f"{site.author} <{site.contact_email}>", safe="")
    url = f"mailto:{recipient}?subject=&body="
    return link(url, text)


def link(url: str, label: str) -> Markup:
    return Markup("<a href=\"{url}\" class=\"text-blue-700 underline font-bold\">{label}</a>").format(
        url=url,
        label=label,
    )


def page(site: SiteConfig, title: str, content: Markup) -> str:
    address = Markup("<br />").join(site.address_lines)
    return str(
        Markup(
            "<!doctype html>\n"
            "<html lang=\"en\">"
            "<head>"
            "<title>{title} - {site_name}</title>"
            "<meta charset=\"UTF-8\" />"
            "<meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />"
            "<link href=\"{stylesheet}\" rel=\"stylesheet\" />"
            "</head>"
            "<body class=\"max-w-xl mx-auto p-2\">"
            "<header><a href=\"/\"><h1>{site_name}</h1></a></header>"
            "<main>{content}</main>"
            "<hr class=\"w-1/2 mx-auto my-16\" />"
            "<footer class=\"max-w-fit mx-auto text-sm\">"
            "<p class=\"max-w-fit mx-auto italic\">A website by</p>"
            "<address>"
            "<div>{address}<br /></div>"
            "<div class=\"my-4\">\N{E-MAIL SYMBOL} <a href=\"mailto:{email}\">{email}</a></div>"
            "</address>"
            "</footer>"
            "</body>"
            "</html>\n"
        ).format(
            title=title,
            site_name=site.site_name,
            stylesheet=site.stylesheet,
            content=content,
            address=address,
            email=site.contact_email,
        )
    )
