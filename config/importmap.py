# Modules épinglés de l'application (exécuté par importmap.declaration.draw)
pin("application", to="js/application.js", preload=True)
pin_all_from("demo/static/js/controllers", under="controllers", to="js/controllers", preload=True)
pin_all_from("demo/static/js/components", under="components", to="js/components")
