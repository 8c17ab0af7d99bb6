"""
Curated entries loaded by seed.py.

Alternatives name their categories with free-form keywords which
CATEGORY_KEYWORD_MAP resolves to category slugs, and their proprietary
counterparts by slug.
"""

CATEGORIES = [
    {"name": "Productivity", "slug": "productivity", "icon": "Zap",
     "description": "Tools that help individuals and teams get more done every day"},
    {"name": "Project Management", "slug": "project-management", "icon": "ClipboardList", "parent": "productivity",
     "description": "Project planning, task tracking, and team workflow management software"},
    {"name": "Note Taking", "slug": "note-taking", "icon": "NotebookPen", "parent": "productivity",
     "description": "Notes, personal wikis and knowledge capture applications"},
    {"name": "Communication", "slug": "communication", "icon": "MessageCircle",
     "description": "Communication platforms for messaging, calls, and team coordination tools"},
    {"name": "Team Chat", "slug": "team-chat", "icon": "MessagesSquare", "parent": "communication",
     "description": "Team chat applications for real-time messaging and group conversations"},
    {"name": "Video Conferencing", "slug": "video-conferencing", "icon": "Video", "parent": "communication",
     "description": "Video meetings, webinars, and virtual conference call software solutions"},
    {"name": "Design", "slug": "design", "icon": "Palette",
     "description": "Graphic design, prototyping, and image editing applications"},
    {"name": "Developer Tools", "slug": "developer-tools", "icon": "Terminal",
     "description": "Editors, source hosting, and tooling for software developers"},
    {"name": "Analytics", "slug": "analytics", "icon": "BarChart3",
     "description": "Web analytics and product analytics that respect visitor privacy"},
    {"name": "Cloud Storage", "slug": "cloud-storage", "icon": "Cloud",
     "description": "File sync, sharing, and self-hosted storage platforms"},
    {"name": "Password Managers", "slug": "password-managers", "icon": "KeyRound",
     "description": "Password vaults and secret management for people and teams"},
    {"name": "Automation", "slug": "automation", "icon": "Workflow",
     "description": "Workflow automation connecting apps, APIs, and data sources"},
]

CATEGORY_KEYWORD_MAP = {
    "productivity": ["productivity"],
    "notes": ["note-taking", "productivity"],
    "wiki": ["note-taking"],
    "knowledge": ["note-taking"],
    "project": ["project-management"],
    "kanban": ["project-management"],
    "tasks": ["project-management", "productivity"],
    "chat": ["team-chat", "communication"],
    "messaging": ["team-chat", "communication"],
    "video": ["video-conferencing", "communication"],
    "meetings": ["video-conferencing"],
    "design": ["design"],
    "prototyping": ["design"],
    "image": ["design"],
    "editor": ["developer-tools"],
    "git": ["developer-tools"],
    "devtools": ["developer-tools"],
    "analytics": ["analytics"],
    "storage": ["cloud-storage"],
    "sync": ["cloud-storage"],
    "passwords": ["password-managers"],
    "security": ["password-managers"],
    "automation": ["automation"],
    "workflows": ["automation"],
}

PROPRIETARY = [
    {"name": "Notion", "slug": "notion", "website": "https://www.notion.so",
     "description": "All-in-one workspace for notes, docs, and project management", "category_keywords": ["notes", "productivity"]},
    {"name": "Trello", "slug": "trello", "website": "https://trello.com",
     "description": "Kanban-style boards for organizing projects and tasks", "category_keywords": ["kanban"]},
    {"name": "Jira", "slug": "jira", "website": "https://www.atlassian.com/software/jira",
     "description": "Issue and project tracking for software teams", "category_keywords": ["project", "devtools"]},
    {"name": "Slack", "slug": "slack", "website": "https://slack.com",
     "description": "Channel-based team messaging platform", "category_keywords": ["chat"]},
    {"name": "Zoom", "slug": "zoom", "website": "https://zoom.us",
     "description": "Video meetings and webinars", "category_keywords": ["video"]},
    {"name": "Figma", "slug": "figma", "website": "https://www.figma.com",
     "description": "Collaborative interface design and prototyping", "category_keywords": ["design", "prototyping"]},
    {"name": "Adobe Photoshop", "slug": "adobe-photoshop", "website": "https://www.adobe.com/products/photoshop.html",
     "description": "Raster graphics editor", "category_keywords": ["image"]},
    {"name": "Visual Studio Code", "slug": "visual-studio-code", "website": "https://code.visualstudio.com",
     "description": "Source code editor with proprietary Microsoft builds", "category_keywords": ["editor"]},
    {"name": "GitHub", "slug": "github", "website": "https://github.com",
     "description": "Hosted git repositories and collaboration", "category_keywords": ["git"]},
    {"name": "Google Analytics", "slug": "google-analytics", "website": "https://analytics.google.com",
     "description": "Web traffic analytics", "category_keywords": ["analytics"]},
    {"name": "Dropbox", "slug": "dropbox", "website": "https://www.dropbox.com",
     "description": "Cloud file storage and sync", "category_keywords": ["storage", "sync"]},
    {"name": "1Password", "slug": "1password", "website": "https://1password.com",
     "description": "Password manager for individuals and businesses", "category_keywords": ["passwords"]},
    {"name": "Zapier", "slug": "zapier", "website": "https://zapier.com",
     "description": "No-code automation between web apps", "category_keywords": ["automation"]},
]

ALTERNATIVES = [
    {"name": "AppFlowy", "slug": "appflowy", "website": "https://appflowy.io", "github": "https://github.com/AppFlowy-IO/AppFlowy",
     "short_description": "Open source Notion alternative built with Flutter and Rust",
     "description": "AppFlowy is an AI collaborative workspace where you stay in control of your data.",
     "license": "AGPL-3.0", "is_self_hosted": True, "stars": 58000, "forks": 3900, "health_score": 92,
     "category_keywords": ["notes", "productivity"], "alternative_to": ["notion"], "featured": True},
    {"name": "AFFiNE", "slug": "affine", "website": "https://affine.pro", "github": "https://github.com/toeverything/AFFiNE",
     "short_description": "Privacy-first knowledge base merging docs, whiteboards and databases",
     "description": "AFFiNE is a workspace with fully merged docs, whiteboards and databases.",
     "license": "MIT", "is_self_hosted": True, "stars": 44000, "forks": 2900, "health_score": 90,
     "category_keywords": ["knowledge", "notes"], "alternative_to": ["notion"]},
    {"name": "Outline", "slug": "outline", "website": "https://www.getoutline.com", "github": "https://github.com/outline/outline",
     "short_description": "Fast, collaborative knowledge base for growing teams",
     "description": "Outline is a wiki and knowledge base built with React and Node.js.",
     "license": "BSL-1.1", "is_self_hosted": True, "stars": 29000, "forks": 2800, "health_score": 88,
     "category_keywords": ["wiki"], "alternative_to": ["notion"]},
    {"name": "Wekan", "slug": "wekan", "website": "https://wekan.github.io", "github": "https://github.com/wekan/wekan",
     "short_description": "Open source kanban board",
     "description": "Wekan is a completely open source kanban board with a MIT license.",
     "license": "MIT", "is_self_hosted": True, "stars": 19000, "forks": 2800, "health_score": 78,
     "category_keywords": ["kanban", "tasks"], "alternative_to": ["trello"]},
    {"name": "Plane", "slug": "plane", "website": "https://plane.so", "github": "https://github.com/makeplane/plane",
     "short_description": "Open source project planning tool",
     "description": "Plane tracks issues, sprints and product roadmaps without the chaos.",
     "license": "AGPL-3.0", "is_self_hosted": True, "stars": 30000, "forks": 1700, "health_score": 91,
     "category_keywords": ["project", "kanban"], "alternative_to": ["jira", "trello"], "featured": True},
    {"name": "Mattermost", "slug": "mattermost", "website": "https://mattermost.com", "github": "https://github.com/mattermost/mattermost",
     "short_description": "Secure collaboration for technical teams",
     "description": "Mattermost is an open core, self-hosted collaboration platform with chat, workflows and integrations.",
     "license": "AGPL-3.0", "is_self_hosted": True, "stars": 30000, "forks": 7000, "health_score": 93,
     "category_keywords": ["chat", "messaging"], "alternative_to": ["slack"], "featured": True},
    {"name": "Rocket.Chat", "slug": "rocket-chat", "website": "https://rocket.chat", "github": "https://github.com/RocketChat/Rocket.Chat",
     "short_description": "Communications platform for organizations with high data protection standards",
     "description": "Rocket.Chat is a fully customizable communications platform.",
     "license": "MIT", "is_self_hosted": True, "stars": 40000, "forks": 10000, "health_score": 92,
     "category_keywords": ["chat"], "alternative_to": ["slack"]},
    {"name": "Jitsi Meet", "slug": "jitsi-meet", "website": "https://jitsi.org", "github": "https://github.com/jitsi/jitsi-meet",
     "short_description": "Secure, simple and scalable video conferences",
     "description": "Jitsi Meet is a set of open source projects for video conferencing.",
     "license": "Apache-2.0", "is_self_hosted": True, "stars": 22000, "forks": 6500, "health_score": 89,
     "category_keywords": ["video", "meetings"], "alternative_to": ["zoom"]},
    {"name": "Penpot", "slug": "penpot", "website": "https://penpot.app", "github": "https://github.com/penpot/penpot",
     "short_description": "Design and prototyping platform for cross-domain teams",
     "description": "Penpot is the open source design tool for design and code collaboration.",
     "license": "MPL-2.0", "is_self_hosted": True, "stars": 33000, "forks": 1800, "health_score": 90,
     "category_keywords": ["design", "prototyping"], "alternative_to": ["figma"], "featured": True},
    {"name": "GIMP", "slug": "gimp", "website": "https://www.gimp.org", "github": "https://github.com/GNOME/gimp",
     "short_description": "GNU Image Manipulation Program",
     "description": "GIMP is a cross-platform image editor for photo retouching, composition and authoring.",
     "license": "GPL-3.0", "is_self_hosted": False, "stars": 5000, "forks": 600, "health_score": 80,
     "category_keywords": ["image", "design"], "alternative_to": ["adobe-photoshop"]},
    {"name": "VSCodium", "slug": "vscodium", "website": "https://vscodium.com", "github": "https://github.com/VSCodium/vscodium",
     "short_description": "Binary releases of VS Code without telemetry",
     "description": "VSCodium ships freely licensed builds of the VS Code editor.",
     "license": "MIT", "is_self_hosted": False, "stars": 26000, "forks": 1100, "health_score": 86,
     "category_keywords": ["editor"], "alternative_to": ["visual-studio-code"]},
    {"name": "Gitea", "slug": "gitea", "website": "https://about.gitea.com", "github": "https://github.com/go-gitea/gitea",
     "short_description": "Painless self-hosted git service",
     "description": "Gitea is a lightweight code hosting solution written in Go.",
     "license": "MIT", "is_self_hosted": True, "stars": 46000, "forks": 5500, "health_score": 94,
     "category_keywords": ["git", "devtools"], "alternative_to": ["github"]},
    {"name": "GitLab", "slug": "gitlab", "website": "https://about.gitlab.com", "github": "https://github.com/gitlabhq/gitlabhq",
     "short_description": "DevSecOps platform",
     "description": "GitLab is a single application for the whole software development lifecycle.",
     "license": "MIT", "is_self_hosted": True, "stars": 24000, "forks": 5800, "health_score": 90,
     "category_keywords": ["git", "project"], "alternative_to": ["github", "jira"]},
    {"name": "Plausible", "slug": "plausible", "website": "https://plausible.io", "github": "https://github.com/plausible/analytics",
     "short_description": "Simple, privacy-friendly web analytics",
     "description": "Plausible is lightweight and cookie-free web analytics.",
     "license": "AGPL-3.0", "is_self_hosted": True, "stars": 21000, "forks": 1100, "health_score": 89,
     "category_keywords": ["analytics"], "alternative_to": ["google-analytics"]},
    {"name": "Umami", "slug": "umami", "website": "https://umami.is", "github": "https://github.com/umami-software/umami",
     "short_description": "Privacy-focused alternative to Google Analytics",
     "description": "Umami is a simple, fast, privacy-focused web analytics solution.",
     "license": "MIT", "is_self_hosted": True, "stars": 23000, "forks": 4300, "health_score": 91,
     "category_keywords": ["analytics"], "alternative_to": ["google-analytics"]},
    {"name": "Nextcloud", "slug": "nextcloud", "website": "https://nextcloud.com", "github": "https://github.com/nextcloud/server",
     "short_description": "Self-hosted content collaboration platform",
     "description": "Nextcloud server gives you file sync and share, calendars, contacts and more.",
     "license": "AGPL-3.0", "is_self_hosted": True, "stars": 28000, "forks": 4000, "health_score": 93,
     "category_keywords": ["storage", "sync", "productivity"], "alternative_to": ["dropbox"], "featured": True},
    {"name": "Syncthing", "slug": "syncthing", "website": "https://syncthing.net", "github": "https://github.com/syncthing/syncthing",
     "short_description": "Continuous file synchronization",
     "description": "Syncthing replaces proprietary sync and cloud services with something open and decentralized.",
     "license": "MPL-2.0", "is_self_hosted": True, "stars": 66000, "forks": 4400, "health_score": 95,
     "category_keywords": ["sync"], "alternative_to": ["dropbox"]},
    {"name": "Bitwarden", "slug": "bitwarden", "website": "https://bitwarden.com", "github": "https://github.com/bitwarden/server",
     "short_description": "Open source password management",
     "description": "Bitwarden infrastructure and clients for secure password sharing.",
     "license": "AGPL-3.0", "is_self_hosted": True, "stars": 16000, "forks": 1300, "health_score": 90,
     "category_keywords": ["passwords", "security"], "alternative_to": ["1password"]},
    {"name": "KeePassXC", "slug": "keepassxc", "website": "https://keepassxc.org", "github": "https://github.com/keepassxreboot/keepassxc",
     "short_description": "Cross-platform community-driven port of KeePass",
     "description": "KeePassXC is a modern, secure, offline password manager.",
     "license": "GPL-3.0", "is_self_hosted": False, "stars": 22000, "forks": 1500, "health_score": 88,
     "category_keywords": ["passwords"], "alternative_to": ["1password"]},
    {"name": "n8n", "slug": "n8n", "website": "https://n8n.io", "github": "https://github.com/n8n-io/n8n",
     "short_description": "Fair-code workflow automation platform",
     "description": "n8n connects anything to everything with a node-based workflow editor.",
     "license": "Sustainable Use License", "is_self_hosted": True, "stars": 50000, "forks": 7000, "health_score": 95,
     "category_keywords": ["automation", "workflows"], "alternative_to": ["zapier"], "featured": True},
]
