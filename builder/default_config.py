# Default build configuration

FRAMEWORK_VERSION = "18.2.0"

DEFAULT_CONFIG = {
    "root": ".",
    "output_dir": "dist",
    "source_document": "index.html",
    "script_entry": "src/app.js",
    "script_output": "bundle.min.js",
    "style_entries": {
        "reset.css": "reset.min.css",
        "styles.css": "styles.min.css",
    },
    "primary_style_output": "styles.min.css",
    "font_file": "lato.woff2",
    "copy_dirs": ["assets", "vendors"],
    "framework_version": FRAMEWORK_VERSION,
    "cdn_base": "https://unpkg.com",
    "esbuild_binary": "esbuild",
    "jsx_factory": "React.createElement",
    "jsx_fragment": "React.Fragment",
    "node_env": "production",
    "suggestions": [
        "Convert images to WebP:\n"
        "   npx @squoosh/cli --webp '{\"quality\":65}' dist/assets/*.png",
        "Optimize SVG:\n"
        "   npx svgo dist/assets/*.svg",
        "Check bundle sizes:\n"
        "   du -sh dist/* | sort -hr",
    ],
}
